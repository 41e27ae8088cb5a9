import importlib
from typing import Any, Dict, List, Optional, Type

from piggyback.config.settings import ConfigLoader
from piggyback.logging_setup import get_logger
from piggyback.parsers.base import TransactionParser

logger = get_logger(__name__)


def _import_parser_class(dotted_path: str) -> Type[TransactionParser]:
    """Import `package.module.ClassName` and return the class."""
    module_path, class_name = dotted_path.rsplit('.', 1)
    module = importlib.import_module(module_path)
    try:
        return getattr(module, class_name)
    except AttributeError as e:
        raise ImportError(f"Module '{module_path}' has no parser class '{class_name}'") from e


class ParserFactory:
    """
    Registry of transaction sources and the parsers that read them.

    A source id ('up-api', 'csv-export') maps to a parser class plus default
    constructor options, so one class can back several configured sources.
    The registry is filled once from parsers.json and then locked.
    """

    _locked = False
    _registry: Dict[str, Type[TransactionParser]] = {}
    _defaults: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def register(
        cls,
        source: str,
        parser_class: Type[TransactionParser],
        **defaults: Any,
    ) -> None:
        """
        Register a parser class for a source id.

        Args:
            source: Source id used on the command line and in config
            parser_class: TransactionParser subclass
            defaults: Constructor options applied on every create_parser call

        Raises:
            RuntimeError: If the registry is locked
            ValueError: If the source is already taken
            TypeError: If parser_class isn't a TransactionParser subclass
        """
        if cls._locked:
            raise RuntimeError("Registry is locked, cannot add more parsers")

        if source in cls._registry:
            raise ValueError(f"Parser for '{source}' is already registered")

        if not isinstance(parser_class, type) or not issubclass(parser_class, TransactionParser):
            raise TypeError(f"{parser_class} must inherit from TransactionParser")

        cls._registry[source] = parser_class
        cls._defaults[source] = dict(defaults)
        logger.debug("Registered parser %s for source '%s'", parser_class.__name__, source)

    @classmethod
    def lock_registry(cls):
        cls._locked = True

    @classmethod
    def reset(cls):
        """Empty and unlock the registry (tests only)"""
        cls._registry = {}
        cls._defaults = {}
        cls._locked = False

    @classmethod
    def create_parser(cls, source: str, **options: Any) -> TransactionParser:
        """
        Build the parser for a source.

        Options given here win over the defaults registered for the source.

        Raises:
            ValueError: If the source is unknown

        Example:
            parser = ParserFactory.create_parser('up-api', local_account_ids=accounts)
        """
        if source not in cls._registry:
            available = ', '.join(cls._registry.keys())
            raise ValueError(
                f"No parser registered for '{source}'. "
                f"Available parsers: {available}"
            )

        return cls._registry[source](**{**cls._defaults[source], **options})

    @classmethod
    def get_available_sources(cls) -> List[str]:
        return list(cls._registry.keys())

    @classmethod
    def load_parsers_from_config(
        cls,
        config: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Register every parser listed in config, then lock the registry.

        Each entry needs "source" and "class" (dotted path); an optional
        "options" object becomes the source's default constructor options.

        Args:
            config: Parsed parsers config. If None, loads parsers.json via ConfigLoader.

        Raises:
            KeyError: If an entry lacks "source" or "class"
            ImportError: If a class path can't be imported
        """
        if config is None:
            config = ConfigLoader.load_parsers_config()

        for entry in config['parsers']:
            parser_class = _import_parser_class(str(entry['class']))
            cls.register(entry['source'], parser_class, **(entry.get('options') or {}))

        cls.lock_registry()
