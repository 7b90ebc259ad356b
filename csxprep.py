import argparse
import sys
import os
import json

from pydantic import ValidationError

from preprocess.errors import PreprocessError
from preprocess.options import load_options
from preprocess.preprocessor import FilePreProcessor
from project_scan import set_verbose, debug_log, log, error, process_directory

SAMPLE_MAIN = '''using System;
#load "lib/helper.csx"

Console.WriteLine(Helper.Greet("csx"));
'''

SAMPLE_HELPER = '''using System.Text;

public static class Helper
{
    public static string Greet(string name) => new StringBuilder("Hello ").Append(name).ToString();
}
'''

def get_options(args):
    try:
        options = load_options(args.config)
    except (ValidationError, FileNotFoundError, json.JSONDecodeError) as e:
        error(f"Invalid options file: {e}")
        sys.exit(1)
    if getattr(args, "no_line_directives", False):
        options.emit_line_directives = False
    if getattr(args, "strict", False):
        options.strict_loads = True
    debug_log(f"Options: {options.model_dump()}")
    return options

def cmd_process(args):
    set_verbose(args.verbose)
    options = get_options(args)
    preprocessor = FilePreProcessor(options=options)

    try:
        if args.filename is None or args.filename == "-":
            result = preprocessor.process_script(sys.stdin.read())
        elif not os.path.exists(args.filename):
            error(f"File '{args.filename}' not found.")
            sys.exit(1)
        else:
            result = preprocessor.process_file(args.filename)
    except PreprocessError as e:
        error(f"Preprocessing Failed:\n{e}")
        sys.exit(1)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(result.code)

    for missing in result.missing_scripts:
        log(f"Skipped missing #load target: {missing}")

def cmd_scan(args):
    set_verbose(args.verbose)
    options = get_options(args)

    if not os.path.isdir(args.directory):
        error(f"'{args.directory}' is not a directory")
        sys.exit(1)

    scan = process_directory(args.directory, options)

    if args.json:
        print(scan.model_dump_json(indent=2))
    else:
        for project in scan.projects:
            print(f"{project.path}")
            print(f"  usings:     {', '.join(project.usings)}")
            print(f"  references: {', '.join(describe_reference(d) for d in project.reference_details) or '-'}")
            print(f"  loaded:     {', '.join(project.loaded_scripts) or '-'}")
            if project.missing_scripts:
                print(f"  missing:    {', '.join(project.missing_scripts)}")
        for path, message in scan.failures.items():
            print(f"{path}\n  FAILED: {message.strip()}")

    if not scan.ok:
        sys.exit(1)

def describe_reference(detail):
    if detail["kind"] == "assembly":
        return detail["name"]
    return detail["path"] if detail["exists"] else f"{detail['path']} (missing)"

def cmd_init(args):
    log("Initializing script project...")
    os.makedirs("lib", exist_ok=True)
    with open("main.csx", "w") as f:
        f.write(SAMPLE_MAIN)
    with open(os.path.join("lib", "helper.csx"), "w") as f:
        f.write(SAMPLE_HELPER)
    log("Created main.csx and lib/helper.csx")


def main():
    parser = argparse.ArgumentParser(description="C# script preprocessor")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    parser.add_argument("--config", help="Options file (default: csxprep.json or ~/.csxprep/options.json)")
    subparsers = parser.add_subparsers(dest="command")

    process = subparsers.add_parser("process", help="Merge a script and its #load graph")
    process.add_argument("filename", nargs="?", default="-", help="Script to process (default: read from stdin)")
    process.add_argument("--json", action="store_true", help="Print the full result as JSON")
    process.add_argument("--no-line-directives", action="store_true", help="Do not inject #line markers")
    process.add_argument("--strict", action="store_true", help="Fail on missing #load targets")

    scan = subparsers.add_parser("scan", help="Preprocess every script in a directory")
    scan.add_argument("directory")
    scan.add_argument("--json", action="store_true", help="Print the scan result as JSON")
    scan.add_argument("--strict", action="store_true", help="Fail on missing #load targets")

    subparsers.add_parser("init", help="Create a sample script project")

    args = parser.parse_args()

    if args.command == "process": cmd_process(args)
    elif args.command == "scan": cmd_scan(args)
    elif args.command == "init": cmd_init(args)
    else: parser.print_help()

if __name__ == "__main__":
    main()
