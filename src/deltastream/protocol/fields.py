"""Envelope vocabulary.

Keep the on-the-wire key names in one place to avoid stringly-typed frame
handling.
"""

# Frame envelope
TYPE = "f"
STREAM = "u"
VERSION = "v"
TIME = "t"
VALUE = "d"
PATCH = "p"

# Scalar patch slot wrapper
SLOT_VALUE = "v"

# Keyed collection delta
MODIFICATIONS = "m"
ADDITIONS = "a"
DELETIONS = "d"
ORDER = "o"

# Modification entry
ENTRY_KEY = "k"
ENTRY_PATCH = "p"

# Largest version an unsigned 64-bit counter can hold
VERSION_MAX = 2 ** 64 - 1
