import sys
import yaml
import json
from pathlib import Path
from typing import Optional
from jsonschema import validate, ValidationError

from footy import config

# Paths (inside the package)
PKG = Path(__file__).resolve().parent
DATA = PKG / "data"
SCHEMAS = PKG / "schemas"


def _load_yaml(p: Path):
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _load_json(p: Path):
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_file(data_file: Path, schema_file: Path, name: str) -> bool:
    loader = _load_json if data_file.suffix == ".json" else _load_yaml
    try:
        data = loader(data_file)
        schema = _load_json(schema_file)
        validate(instance=data, schema=schema)
        print(f"[OK] {name} validated successfully")
        return True
    except FileNotFoundError:
        print(f"[ERROR] Missing file: {data_file}")
        return False
    except ValidationError as e:
        print(f"[ERROR] {name} failed validation: {e.message}")
        return False
    except (ValueError, yaml.YAMLError) as e:
        print(f"[ERROR] {name} could not be parsed: {e}")
        return False


def main(subscriptions_path: Optional[str] = None) -> int:
    subs = Path(subscriptions_path or config.SUBSCRIPTIONS_PATH)
    ok = True
    ok &= validate_file(DATA / "prompts.yaml", SCHEMAS / "prompts.schema.json", "prompts.yaml")
    if subs.exists():
        ok &= validate_file(subs, SCHEMAS / "subscriptions.schema.json", subs.name)
    else:
        print(f"[SKIP] {subs} does not exist yet")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
