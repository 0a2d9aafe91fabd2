"""
Paramètres d'exécution du traducteur.

``RunConfig`` et ``Settings`` sont des dataclasses immuables construites une
seule fois par ``load_settings()`` puis partagées en lecture seule par tous
les workers. Les réglages globaux du logging restent dans ``config.py``.

Ordre de priorité : valeurs par défaut < fichier TOML (--config) < options
de la ligne de commande. La clé API vient de la variable d'environnement
MK_TRANSLATOR_API_KEY (chargée aussi depuis .env) ou de la section [api].
"""

import argparse
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from jinja2 import Environment, StrictUndefined, TemplateError

from .exceptions import ConfigError
from .logger import get_logger

logger = get_logger(__name__)

API_KEY_ENV = "MK_TRANSLATOR_API_KEY"
SUPPORTED_PROVIDERS = ("openai", "claude", "gemini")

DEFAULT_SOURCE_DIR = "pages"
DEFAULT_TARGET_DIR = "pages.zh"
DEFAULT_CONCURRENCY = 5
DEFAULT_PROVIDER = "openai"
DEFAULT_PROMPT_FILE = "prompt.template"
DEFAULT_TIMEOUT = 120.0
DEFAULT_EXTENSION = ".md"

DEFAULT_PROMPT_TEMPLATE = """\
You are a translation assistant specialized in command-line tool documentation (like tldr pages).
Translate the following Markdown content from English to Simplified Chinese.

**Crucial Instructions:**
1.  Preserve the original Markdown formatting EXACTLY (code blocks with backticks ``, {{ '{{placeholders}}' }}, links, headers, lists, etc.).
2.  Ensure technical terms are translated accurately and consistently in the context of command-line usage.
3.  ONLY output the translated Markdown content. Do NOT include any other explanatory text before or after.
4.  Wrap your ENTIRE translated Markdown output within <translate> tags. Example: <translate># translated content...</translate>

Original English Markdown:
---
{{ content }}
---

Translated Chinese Markdown (within <translate> tags):"""


@dataclass(frozen=True)
class RunConfig:
    """
    Paramètres d'une exécution du pipeline, immuables pendant le run.

    Attributes:
        source_dir: Répertoire contenant les documents à traduire
        target_dir: Répertoire de sortie (même arborescence que la source)
        concurrency: Nombre de workers, fixe pour toute l'exécution
        overwrite: Remplacer les fichiers cibles existants
        dry_run: Simuler (aucun appel backend, aucune écriture)
        timeout: Délai maximum d'un appel backend, en secondes
        extension: Extension des documents recherchés (insensible à la casse)
    """

    source_dir: Path
    target_dir: Path
    concurrency: int = DEFAULT_CONCURRENCY
    overwrite: bool = False
    dry_run: bool = False
    timeout: float = DEFAULT_TIMEOUT
    extension: str = DEFAULT_EXTENSION


@dataclass(frozen=True)
class Settings:
    """Configuration complète : pipeline + backend + prompt."""

    run: RunConfig
    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    api_url: str = ""
    model: str = ""
    prompt_file: Path = Path(DEFAULT_PROMPT_FILE)
    prompt_template: str = field(default=DEFAULT_PROMPT_TEMPLATE, repr=False)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Lecture du fichier de configuration '{path}' impossible: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Fichier TOML invalide '{path}': {e}") from e

    logger.info(f"📄 Configuration chargée depuis '{path}'")
    return data


def _pick(cli_value: Any, file_value: Any, default: Any) -> Any:
    """Option CLI explicite > valeur du fichier > défaut."""
    if cli_value is not None:
        return cli_value
    if file_value not in (None, ""):
        return file_value
    return default


def _as_number(convert, name: str, value: Any):
    """Convertit une valeur numérique du fichier TOML, ConfigError si invalide."""
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Valeur invalide pour {name}: {value!r}") from e


def load_prompt_template(prompt_file: Path) -> str:
    """
    Charge le template de prompt, ou le template par défaut.

    Un fichier absent ou illisible n'est pas fatal : on logge un
    avertissement et on retombe sur DEFAULT_PROMPT_TEMPLATE.
    Un template dont la syntaxe Jinja2 est invalide, ou qui utilise une autre
    variable que ``content``, lève ConfigError.
    """
    try:
        template = prompt_file.read_text(encoding="utf-8")
        logger.info(f"📝 Prompt chargé depuis '{prompt_file}'")
    except FileNotFoundError:
        logger.warning(f"⚠️ Fichier de prompt '{prompt_file}' introuvable, prompt par défaut utilisé")
        template = DEFAULT_PROMPT_TEMPLATE
    except OSError as e:
        logger.warning(f"⚠️ Lecture du prompt '{prompt_file}' impossible ({e}), prompt par défaut utilisé")
        template = DEFAULT_PROMPT_TEMPLATE

    # Seule la variable content est fournie au rendu
    try:
        Environment(undefined=StrictUndefined).from_string(template).render(content="")
    except TemplateError as e:
        raise ConfigError(f"Template de prompt invalide ({prompt_file}): {e}") from e
    return template


def load_settings(args: argparse.Namespace) -> Settings:
    """
    Construit et valide les Settings à partir des arguments de la CLI.

    Args:
        args: Namespace produit par ``cli.build_parser()``. Les options non
              fournies valent None, ce qui laisse la place au fichier TOML.

    Returns:
        Settings validés

    Raises:
        ConfigError: Si une valeur est invalide
    """
    load_dotenv()

    file_data: dict[str, Any] = {}
    if args.config:
        file_data = _load_toml(Path(args.config))
    api_section = file_data.get("api", {})
    general = file_data.get("general", {})

    provider = str(_pick(args.provider, api_section.get("provider"), DEFAULT_PROVIDER)).lower()
    api_key = api_section.get("key") or os.getenv(API_KEY_ENV, "")
    dry_run = bool(args.dry_run or general.get("dry_run", False))
    overwrite = bool(args.overwrite or general.get("overwrite", False))
    concurrency = _as_number(
        int, "concurrency", _pick(args.concurrency, general.get("concurrency"), DEFAULT_CONCURRENCY)
    )
    timeout = _as_number(float, "timeout", _pick(args.timeout, general.get("timeout"), DEFAULT_TIMEOUT))

    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Provider '{provider}' non supporté. Providers disponibles: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    if not api_key and not dry_run:
        raise ConfigError(
            f"Clé API manquante: définissez {API_KEY_ENV} ou [api].key (sauf avec --dry-run)"
        )
    if concurrency <= 0:
        raise ConfigError("La concurrence (--concurrency) doit être supérieure à 0")
    if timeout <= 0:
        raise ConfigError("Le timeout (--timeout) doit être supérieur à 0")

    source_dir = Path(_pick(args.source, general.get("source_dir"), DEFAULT_SOURCE_DIR))
    target_dir = Path(_pick(args.target, general.get("target_dir"), DEFAULT_TARGET_DIR))
    if not source_dir.exists():
        raise ConfigError(f"Le répertoire source '{source_dir}' n'existe pas")

    prompt_file = Path(_pick(args.prompt_file, general.get("prompt_file"), DEFAULT_PROMPT_FILE))
    prompt_template = load_prompt_template(prompt_file)

    if not dry_run:
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Création du répertoire cible '{target_dir}' impossible: {e}") from e

    run = RunConfig(
        source_dir=source_dir,
        target_dir=target_dir,
        concurrency=concurrency,
        overwrite=overwrite,
        dry_run=dry_run,
        timeout=timeout,
        extension=_pick(args.ext, general.get("extension"), DEFAULT_EXTENSION),
    )
    return Settings(
        run=run,
        provider=provider,
        api_key=api_key,
        api_url=_pick(args.api_url, api_section.get("endpoint"), ""),
        model=_pick(args.model, api_section.get("model"), ""),
        prompt_file=prompt_file,
        prompt_template=prompt_template,
    )
