"""
Example item builders.

Builds a small "Tools" menu holding two actions: one with a single
profile, one with a profile per kind of selection. Used by the demo
scripts and the tests.
"""
from menuconf.model import Action, Menu, Profile


def build_example_action(action_id: str = "open-terminal-here") -> Action:
    action = Action(id=action_id)
    action.label = "Open a terminal here"
    action.set("tooltip", "Opens a terminal in the current folder")
    action.set("icon", "utilities-terminal")
    action.set("target_location", True)
    action.set("target_toolbar", True)

    profile = Profile(id="profile-main")
    profile.set("desc_name", "Main profile")
    profile.set("path", "mate-terminal")
    profile.set("parameters", "--working-directory=%d")
    profile.set("isfile", False)
    profile.set("isdir", True)
    profile.set("schemes", ["file", "sftp"])
    action.attach_profile(profile)
    return action


def build_example_checksum_action(action_id: str = "checksum") -> Action:
    action = Action(id=action_id)
    action.label = "Compute checksums"
    action.set("mimetypes", ["application/*", "text/*"])

    single = Profile(id="profile-single")
    single.set("desc_name", "One file")
    single.set("path", "sha256sum")
    single.set("parameters", "%f")
    single.set("selection_count", "=1")
    action.attach_profile(single)

    many = Profile(id="profile-many")
    many.set("desc_name", "Several files")
    many.set("path", "sha256sum")
    many.set("parameters", "%F")
    many.set("accept_multiple", True)
    many.set("selection_count", ">1")
    many.set("basenames", ["*.iso", "*.img,bak"])
    action.attach_profile(many)
    return action


def build_example_menu(menu_id: str = "tools-menu") -> Menu:
    menu = Menu(id=menu_id)
    menu.label = "Tools"
    menu.set("icon", "applications-utilities")
    menu.append_child(build_example_action())
    menu.append_child(build_example_checksum_action())
    return menu
