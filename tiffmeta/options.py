# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Parse options

Defines which metadata blocks are decoded, the output shape, and the chunk
sizes used when reading input incrementally.

Copyright 2025 DNAi inc.
"""

from typing import Any, Dict, Mapping, Optional, Union

# Metadata blocks that can be enabled independently
BLOCKS = ('tiff', 'exif', 'gps', 'interop', 'thumbnail', 'xmp', 'icc', 'iptc')

AVAILABLE_OPTIONS: Dict[str, Dict[str, Any]] = {
    'tiff': {'type': 'bool', 'default': True, 'description': 'Decode the TIFF/EXIF segment (IFD0)'},
    'exif': {'type': 'bool', 'default': True, 'description': 'Decode the Exif sub-IFD'},
    'gps': {'type': 'bool', 'default': True, 'description': 'Decode the GPS sub-IFD'},
    'interop': {'type': 'bool', 'default': False, 'description': 'Decode the Interoperability sub-IFD'},
    'thumbnail': {'type': 'bool', 'default': False, 'description': 'Decode IFD1 (thumbnail)'},
    'xmp': {'type': 'bool', 'default': False, 'description': 'Extract the XMP packet'},
    'icc': {'type': 'bool', 'default': False, 'description': 'Locate the ICC profile (not decoded)'},
    'iptc': {'type': 'bool', 'default': False, 'description': 'Decode IPTC records'},
    'merge_output': {'type': 'bool', 'default': True, 'description': 'Merge all blocks into one mapping'},
    'post_process': {'type': 'bool', 'default': True,
                     'description': 'Revive dates, translate enums, derive GPS coordinates'},
    'whole_file': {'type': 'optional_bool', 'default': None,
                   'description': 'Read the whole input up front (None: only when XMP/ICC/IPTC need it)'},
    'parse_chunk_size': {'type': 'int', 'default': 65536, 'description': 'Size of the first chunk read'},
    'chunk_size': {'type': 'int', 'default': 10000, 'description': 'Size of chunks fetched on demand'},
    'max_chunk_reads': {'type': 'int', 'default': 8, 'description': 'Chunk fetches allowed per parse'},
}

OPTION_ALIASES = {
    'mergeOutput': 'merge_output',
    'postProcess': 'post_process',
    'wholeFile': 'whole_file',
    'parseChunkSize': 'parse_chunk_size',
    'chunkSize': 'chunk_size',
    'maxChunkReads': 'max_chunk_reads',
}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


class ParseOptions:
    """
    Configuration for a parse.

    Options can be given as a mapping (snake_case or the camelCase aliases
    ``mergeOutput``/``postProcess``), as ``True`` to enable every block, or
    as keyword arguments.

    Example:
        >>> options = ParseOptions({'iptc': True, 'mergeOutput': False})
        >>> options.iptc, options.merge_output
        (True, False)
    """

    def __init__(self, options: Union[None, bool, Mapping[str, Any], 'ParseOptions'] = None, **kwargs: Any):
        """
        Initialize options from defaults, then apply overrides.

        Args:
            options: None, True (enable all blocks), a mapping, or ParseOptions
            **kwargs: Additional overrides

        Raises:
            ValueError: If an option name is not recognized
        """
        for option_name, option_info in AVAILABLE_OPTIONS.items():
            setattr(self, option_name, option_info['default'])

        if isinstance(options, ParseOptions):
            options = options.to_dict()
        if options is True:
            for block in BLOCKS:
                setattr(self, block, True)
        elif isinstance(options, Mapping):
            for option_name, value in options.items():
                self.set_option(option_name, value)
        elif options not in (None, False):
            raise ValueError(f"Invalid options: {options!r}")

        for option_name, value in kwargs.items():
            self.set_option(option_name, value)

    def __repr__(self) -> str:
        return f"ParseOptions({self.to_dict()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseOptions):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def set_option(self, option_name: str, value: Any) -> None:
        """
        Set an option value, coercing it to the option's type.

        Raises:
            ValueError: If the option name is unknown or the value has the wrong type
        """
        option_name = OPTION_ALIASES.get(option_name, option_name)
        if option_name not in AVAILABLE_OPTIONS:
            raise ValueError(f"Unknown option: {option_name}. Valid options: {', '.join(AVAILABLE_OPTIONS)}")

        expected_type = AVAILABLE_OPTIONS[option_name]['type']
        if expected_type == 'bool':
            value = _to_bool(value)
        elif expected_type == 'optional_bool':
            value = None if value is None else _to_bool(value)
        elif expected_type == 'int' and not isinstance(value, int):
            try:
                value = int(value)
            except (ValueError, TypeError):
                raise ValueError(f"Option {option_name} requires int value, got {type(value).__name__}")
        setattr(self, option_name, value)

    def to_dict(self) -> Dict[str, Any]:
        return {option_name: getattr(self, option_name) for option_name in AVAILABLE_OPTIONS}

    @property
    def needs_whole_file(self) -> bool:
        """XMP, ICC and IPTC are found by scanning, so they need the whole input."""
        if self.whole_file is not None:
            return self.whole_file
        return bool(self.xmp or self.icc or self.iptc)

    @property
    def enabled_blocks(self) -> Dict[str, bool]:
        return {block: getattr(self, block) for block in BLOCKS}


def process_options(options: Optional[Any] = None) -> ParseOptions:
    """Return ``options`` as ParseOptions."""
    if isinstance(options, ParseOptions):
        return options
    return ParseOptions(options)
