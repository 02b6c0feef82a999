"""
Menu Configuration Codec (menuconf) Package

Reads and writes context-menu configuration records (Menus, Actions and
the Profiles attached to an Action) as XML documents.

Three on-disk dialects are supported:
    - MateConfSchemaV1: legacy verbose schema (with owner and labels)
    - MateConfSchemaV2: concise schema
    - MateConfEntry:    flat "dump" of key/value entries

ARCHITECTURAL GUARANTEE:
------------------------
Attributes are described once, in the Field Descriptor table
(menuconf.fields). The reader and the writer are generic over that
table: there is no per-field code in any dialect.
"""

__version__ = "0.1.0"
