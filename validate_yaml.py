#!/usr/bin/env python3
"""Validate task YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from upkeep.config import load_settings
from upkeep.loader import load_schema, to_plain


def validate_task_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single task YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=to_plain(data), schema=schema)
        ids = [t.get("id") for t in (data or {}).get("tasks") or []]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            errors.append(f"Duplicate task ids: {', '.join(map(str, duplicates))}")
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given task files, or the configured data file."""
    files = [Path(a) for a in (sys.argv[1:] if argv is None else argv)]
    if not files:
        files = [load_settings().data_file]

    schema = load_schema()
    all_valid = True
    for filepath in files:
        if not filepath.exists():
            print(f"FAIL: {filepath} (file not found)")
            all_valid = False
            continue
        errors = validate_task_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
