import sys
import os
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from preprocess.errors import PreprocessError
from preprocess.filesystem import FileSystem
from preprocess.options import ScriptOptions
from preprocess.preprocessor import FilePreProcessor

# Global verbose flag
_VERBOSE = False

def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value

def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)

def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)

def warn(message):
    print(f"\033[93m\033[1mWARN:\033[0m {message}", file=sys.stderr)

def error(message):
    print(f"\033[91m\033[1mERROR:\033[0m {message}", file=sys.stderr)

# ==========================================
# RESULT MODELS
# ==========================================
class ScriptProject(BaseModel):
    """One entry script, ready to hand to a compiler as a single unit."""
    name: str
    path: str
    code: str
    usings: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    reference_details: List[Dict[str, Any]] = Field(default_factory=list)
    loaded_scripts: List[str] = Field(default_factory=list)
    missing_scripts: List[str] = Field(default_factory=list)


class ScanResult(BaseModel):
    directory: str
    projects: List[ScriptProject] = Field(default_factory=list)
    failures: Dict[str, str] = Field(default_factory=dict)
    csx_files: List[str] = Field(default_factory=list)
    usings: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)

    @property
    def ok(self):
        return not self.failures

# ==========================================
# HELPERS
# ==========================================
def _merge(target, values):
    for value in values:
        if value not in target:
            target.append(value)
    return target

def filter_references(references, excluded):
    """Drop references whose lowercase form contains any excluded marker."""
    excluded = [marker.lower() for marker in excluded]
    return [r for r in references if not any(marker in r.lower() for marker in excluded)]

def classify_reference(reference, file_system=None):
    """
    Describe how a compiler should load a recorded reference.

    Returns:
        {"kind": "file", "path": ..., "exists": bool} for rooted paths, or
        {"kind": "assembly", "name": ...} for bare names, with '.dll' appended
        when missing.
    """
    fs = file_system or FileSystem()
    if fs.is_path_rooted(reference):
        return {"kind": "file", "path": reference, "exists": fs.file_exists(reference)}
    name = reference if reference.lower().endswith(".dll") else reference + ".dll"
    return {"kind": "assembly", "name": name}

# ==========================================
# SCANNING
# ==========================================
def find_scripts(directory, options=None, file_system=None):
    options = options or ScriptOptions()
    fs = file_system or FileSystem()
    return fs.enumerate_files(directory, options.file_pattern, recursive=options.recursive)

def build_project(script_path, result, options, file_system=None):
    full_path = os.path.abspath(script_path)
    usings = _merge(list(options.default_namespaces), result.namespaces)
    references = filter_references(result.references, options.excluded_references)
    return ScriptProject(
        name=os.path.basename(script_path),
        path=full_path,
        code=result.code,
        usings=usings,
        references=references,
        reference_details=[classify_reference(r, file_system) for r in references],
        loaded_scripts=[p for p in result.loaded_scripts if p != full_path],
        missing_scripts=list(result.missing_scripts),
    )

def process_directory(directory, options=None, preprocessor=None):
    """
    Preprocess every entry script in a directory.

    Each script gets its own parse context. A script that fails is logged and
    recorded in ScanResult.failures; the others are still processed.
    """
    options = options or ScriptOptions()
    preprocessor = preprocessor or FilePreProcessor(options=options)
    directory = os.path.abspath(directory)

    scan = ScanResult(directory=directory)
    log(f"Detecting {options.file_pattern} files in '{directory}'.")

    scripts = find_scripts(directory, options, preprocessor.file_system)
    if not scripts:
        log(f"Could not find any {options.file_pattern} files")
        return scan

    log(f"Found {len(scripts)} script file(s).")
    _merge(scan.usings, options.default_namespaces)

    for script_path in scripts:
        _merge(scan.csx_files, [script_path])
        try:
            result = preprocessor.process_file(script_path)
        except (PreprocessError, OSError, ValueError) as e:
            error(f"{script_path} will be ignored due to the following error:\n{e}")
            scan.failures[script_path] = str(e)
            continue

        for missing in result.missing_scripts:
            warn(f"{script_path}: #load target '{missing}' was not found and has been skipped.")

        project = build_project(script_path, result, options, preprocessor.file_system)
        debug_log(f"{project.name}: {len(project.usings)} usings, {len(project.references)} references, "
                  f"{len(project.loaded_scripts)} loaded scripts")
        for detail in project.reference_details:
            if detail["kind"] == "file" and not detail["exists"]:
                warn(f"{project.name}: couldn't add reference to '{detail['path']}' because the file was not found.")
            else:
                debug_log(f"Reference from {project.name}: {detail}")

        scan.projects.append(project)
        _merge(scan.csx_files, project.loaded_scripts)
        _merge(scan.usings, project.usings)
        _merge(scan.references, project.references)

    log(f"Processed {len(scan.projects)} script(s), {len(scan.failures)} failed.")
    return scan
