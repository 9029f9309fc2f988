"""Template rendering for the Dockerfile and Kubernetes deployment manifest.

Base templates are Jinja2 documents living next to the generated files in the
server directory. A generated file that already exists is treated as an
operator override and is never rewritten.
"""

import logging
import shutil
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from .errors import ManifestRenderError

logger = logging.getLogger(__name__)

# Base templates shipped with the package
PACKAGED_TEMPLATE_DIR = Path(__file__).parent / "templates"

DOCKERFILE_TEMPLATE = "Dockerfile.base"
DOCKERFILE = "Dockerfile"
MANIFEST_TEMPLATE = "deployment.yaml.base"
MANIFEST = "deployment.yaml"


class Templater:
    """Render base templates into generated files."""

    def _environment(self, template_dir: Path) -> Environment:
        return Environment(
            loader=FileSystemLoader(str(template_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(
        self,
        template_path: str | Path,
        dest_path: str | Path,
        substitutions: dict[str, Any],
    ) -> bool:
        """
        Render a template to a new file.

        Args:
            template_path: Path to the base template
            dest_path: Path of the generated file
            substitutions: Values for every placeholder in the template

        Returns:
            True if the file was written, False if it already existed

        Raises:
            ManifestRenderError: If the template is missing or unreadable,
                references a placeholder that is not in substitutions, or the
                destination cannot be written
        """
        template_path = Path(template_path)
        dest_path = Path(dest_path)

        if dest_path.exists():
            logger.info(f"{dest_path} already exists. Skipping generation.")
            return False

        try:
            template = self._environment(template_path.parent).get_template(template_path.name)
            rendered = template.render(**substitutions)
        except TemplateNotFound:
            raise ManifestRenderError(f"Template not found: {template_path}")
        except UndefinedError as e:
            raise ManifestRenderError(f"Unresolved placeholder in {template_path}: {e}")
        except TemplateSyntaxError as e:
            raise ManifestRenderError(f"Invalid template {template_path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestRenderError(f"Cannot read template {template_path}: {e}")

        try:
            with open(dest_path, "x") as f:
                f.write(rendered)
        except OSError as e:
            raise ManifestRenderError(f"Cannot write {dest_path}: {e}")

        logger.info(f"Generated {dest_path} from {template_path.name}")
        return True

    def install_base_templates(self, server_path: str | Path) -> list[Path]:
        """
        Copy the packaged base templates into a server directory.

        Existing base templates are left alone.

        Args:
            server_path: The gemserver directory

        Returns:
            Paths of the templates that were copied
        """
        server_path = Path(server_path)
        server_path.mkdir(parents=True, exist_ok=True)

        copied = []
        for name in (DOCKERFILE_TEMPLATE, MANIFEST_TEMPLATE):
            dest = server_path / name
            if dest.exists():
                logger.info(f"{dest} already exists")
                continue
            shutil.copyfile(PACKAGED_TEMPLATE_DIR / name, dest)
            copied.append(dest)
            logger.info(f"Installed base template: {dest}")

        return copied
