#!/usr/bin/env python3
"""Validate farm YAML files against the schema."""
import sys
from datetime import date
from pathlib import Path

import yaml
from jsonschema import Draft7Validator, ValidationError, validators

import agmaint
from agmaint import settings


def _is_date(checker, instance) -> bool:
    return isinstance(instance, date)


# safe_load turns unquoted YYYY-MM-DD values into dates, which load_farm accepts
FarmValidator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("date", _is_date),
)


def load_schema() -> dict:
    """Load the JSON schema from agmaint/schema.yaml."""
    schema_path = Path(agmaint.__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_farm_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single farm YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        FarmValidator(schema).validate(data)
        # Schedules and issues must point at existing documents
        equipment_ids = {e["id"] for e in data.get("equipment") or []}
        for key in ("schedules", "issues"):
            for doc in data.get(key) or []:
                if doc["equipmentId"] not in equipment_ids:
                    errors.append(
                        f"Reference error: {key} '{doc['id']}' points at "
                        f"unknown equipment '{doc['equipmentId']}'"
                    )
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.absolute_path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.absolute_path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main():
    """Validate all farm YAML files in the data directory."""
    schema = load_schema()
    data_dir = settings.DATA_DIR

    if not data_dir.exists():
        print(f"Error: data directory not found: {data_dir}")
        return 1

    yaml_files = list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml"))

    if not yaml_files:
        print(f"Warning: No YAML files found in {data_dir}")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_farm_file(filepath, schema)
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
