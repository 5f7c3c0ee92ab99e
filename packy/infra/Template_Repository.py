"""Template repository: reads the template manifest and template files from the config directory."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from packy.infra.paths import CONFIG_DIR, MANIFEST_FILENAME, TEMPLATES_DIRNAME

logger = logging.getLogger(__name__)


class TemplateNotFoundError(LookupError):
    """Raised when a template id is not in the manifest or its file cannot be read."""


class TemplateRepository:
    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._manifest: Optional[Dict[str, Any]] = None

    @property
    def manifest_file(self) -> Path:
        return self.config_dir / MANIFEST_FILENAME

    def _load_manifest(self) -> Dict[str, Any]:
        """Read the manifest once; a missing or broken file yields an empty manifest."""
        if self._manifest is not None:
            return self._manifest
        try:
            with open(self.manifest_file, 'r', encoding='utf-8') as f:
                manifest = json.load(f)
            if not isinstance(manifest, dict):
                raise ValueError("manifest root must be an object")
            self._manifest = manifest
        except FileNotFoundError:
            logger.warning(f"Template manifest not found: {self.manifest_file}. Using empty manifest.")
            self._manifest = {'version': '1.0.0', 'templates': []}
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Failed to load template manifest: {e}")
            self._manifest = {'version': '1.0.0', 'templates': []}
        return self._manifest

    def get_template_list(self) -> List[Dict[str, Any]]:
        '''Metadata of available templates: {id, name, description, icon, filename, tags?}.'''
        return list(self._load_manifest().get('templates') or [])

    def get_template_info(self, template_id: str) -> Dict[str, Any]:
        for info in self.get_template_list():
            if info.get('id') == template_id:
                return info
        raise TemplateNotFoundError(f"Template not found: {template_id}")

    def load_template(self, template_id: str) -> Dict[str, Any]:
        info = self.get_template_info(template_id)
        path = self.config_dir / TEMPLATES_DIRNAME / info['filename']
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load template {info['filename']}: {e}")
            raise TemplateNotFoundError(f"Failed to load template: {info['filename']}") from e
