"""
Export and Import of packing lists and templates as JSON files.
"""
import json
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from packy.logic.templates.builder import build_template
from packy.utilities.constants import DATE_FORMAT, DEFAULT_LIST_NAME
from packy.utilities.validators import ImportValidationError, validate_packing_list

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]+')
_WHITESPACE = re.compile(r'\s+')


def slugify(name: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics into one hyphen, trim hyphens."""
    return _NON_ALNUM.sub('-', (name or '').lower()).strip('-')


def generate_filename(trip: Optional[Dict[str, Any]], today: Optional[date] = None) -> str:
    '''Export filename: packy-<slugified trip name>-<YYYY-MM-DD>.json'''
    safe_name = slugify((trip or {}).get('name') or DEFAULT_LIST_NAME)
    stamp = (today or date.today()).strftime(DATE_FORMAT)
    return f"packy-{safe_name}-{stamp}.json"


def template_filename(template_name: str) -> str:
    return f"packy-template-{_WHITESPACE.sub('-', template_name.lower())}.json"


def to_json(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


class DataExporter:
    """Write packing lists and templates to JSON files."""

    def __init__(self, export_dir: Path):
        self.export_dir = Path(export_dir)

    def _write(self, payload: Dict[str, Any], filename: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.export_dir / filename
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(to_json(payload))
        return output_path

    def export_list(self, document: Dict[str, Any], filename: Optional[str] = None) -> Path:
        """Export a packing list; the filename defaults to the trip-based convention."""
        output_path = self._write(document, filename or generate_filename(document.get('trip')))
        logger.info(f"Exported {len(document.get('items') or [])} items to {output_path}")
        return output_path

    def export_as_template(self, document: Dict[str, Any], template_name: str,
                           description: str = '') -> Path:
        """Export as template (strips trip-specific data, resets packed/completed)."""
        template = build_template(document, template_name, description)
        output_path = self._write(template, template_filename(template_name))
        logger.info(f"Exported template '{template_name}' to {output_path}")
        return output_path


class DataImporter:
    """Read packing lists from JSON files."""

    def read_list(self, input_path: Path) -> Dict[str, Any]:
        """
        Read and validate a packing list file.

        Raises ImportValidationError with every problem found; a file that is not
        valid JSON reports a single 'Invalid JSON file' error.
        """
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Import failed, invalid JSON in {input_path}: {e}")
            raise ImportValidationError(['Invalid JSON file']) from e

        valid, errors = validate_packing_list(data)
        if not valid:
            logger.error(f"Import failed for {input_path}: {len(errors)} problem(s)")
            raise ImportValidationError(errors)
        return data


# CLI interface
if __name__ == "__main__":
    import argparse
    import sys
    from packy.utilities.config import EXPORT_DIR

    parser = argparse.ArgumentParser(description='Validate or convert Packy list files')
    parser.add_argument('action', choices=['validate', 'template'], help='Action to perform')
    parser.add_argument('--file', required=True, help='Input list file path')
    parser.add_argument('--name', help='Template name (for the template action)')
    parser.add_argument('--description', default='', help='Template description')
    parser.add_argument('--out', default=str(EXPORT_DIR), help='Output directory')

    args = parser.parse_args()

    try:
        data = DataImporter().read_list(Path(args.file))
    except ImportValidationError as e:
        print("✗ Invalid list file:")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    if args.action == 'validate':
        print(f"✓ Valid list: {len(data['bags'])} bags, {len(data['categories'])} categories, "
              f"{len(data['items'])} items")
    elif args.action == 'template':
        if not args.name:
            print("Error: --name is required for template")
            sys.exit(1)
        result = DataExporter(Path(args.out)).export_as_template(data, args.name, args.description)
        print(f"✓ Exported to: {result}")
