"""Default settings and persisted preference keys for vimcode."""

from __future__ import annotations

# --- Preference keys (kept stable so stored values survive upgrades) ---
EDITOR_PATH_KEY = "vimcode_editorpath"
SERVER_NAME_KEY = "vimcode_servername"
FORCE_FOREGROUND_KEY = "vimcode_force_foreground"
GENERATE_AUX_PROJECT_KEY = "vimcode_gen_vs_sln"
PATH_MODE_KEY = "vimcode_setpath"
EXTRA_COMMANDS_KEY = "vimcode_extracommands"
CODE_EXTENSIONS_KEY = "vimcode_codeassets"

# --- Preference defaults ---
DEFAULT_EDITOR_PATH = "/usr/local/bin/mvim"
DEFAULT_SERVER_NAME = "Unity"
DEFAULT_FORCE_FOREGROUND = False
DEFAULT_GENERATE_AUX_PROJECT = True
DEFAULT_EXTRA_COMMANDS = ""
DEFAULT_CODE_EXTENSIONS = ".cs,.shader,.h,.m,.c,.cpp,.txt,.md,.json"

# Subdirectory of the project root that holds the host's assets
ASSETS_DIR_NAME = "Assets"
SCRIPTS_DIR_NAME = "Scripts"
