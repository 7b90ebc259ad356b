# ==========================================
# CONFIGURATION
# ==========================================
import json
import os
from typing import List, Optional

from pydantic import BaseModel, Field

CONFIG_FILE = "csxprep.json"
USER_CONFIG_FILE = os.path.join("~", ".csxprep", "options.json")

# Aligned with the namespaces the C# interactive compiler imports by default
DEFAULT_NAMESPACES = [
    "System",
    "System.IO",
    "System.Collections.Generic",
    "System.Console",
    "System.Diagnostics",
    "System.Dynamic",
    "System.Linq",
    "System.Linq.Expressions",
    "System.Text",
    "System.Threading.Tasks",
]


class ScriptOptions(BaseModel):
    """Settings for preprocessing and scanning scripts."""
    default_namespaces: List[str] = Field(default_factory=lambda: list(DEFAULT_NAMESPACES))
    file_pattern: str = "*.csx"
    recursive: bool = False
    strict_loads: bool = False
    emit_line_directives: bool = True
    expand_environment_variables: bool = True
    excluded_references: List[str] = Field(default_factory=lambda: ["scriptcs.contracts"])


def load_options(path: Optional[str] = None) -> ScriptOptions:
    """
    Load options from a JSON file.

    Looks at the explicit path first, then csxprep.json in the working
    directory, then ~/.csxprep/options.json. Returns defaults if none exist.

    Raises:
        FileNotFoundError: If an explicit path does not exist
        pydantic.ValidationError: If the file content does not fit ScriptOptions
    """
    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Options file not found: {path}")
        paths = [path]
    else:
        paths = [CONFIG_FILE, os.path.expanduser(USER_CONFIG_FILE)]

    for p in paths:
        if os.path.exists(p):
            with open(p, "r") as f:
                return ScriptOptions.model_validate(json.load(f))
    return ScriptOptions()
