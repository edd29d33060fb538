from __future__ import annotations
from dataclasses import asdict as asdict_, replace as replace_
import datetime
from pathlib import Path
from pprint import pformat
from typing import Any, Dict, Optional, Tuple, Type, Union

import numpy as np
import yaml

YAML_SUFFIXES = ('.yaml', '.yml')


def yaml_path(path: Union[str, Path]) -> Path:
    path = Path(path)
    if path.suffix not in YAML_SUFFIXES:
        raise ValueError(f'Specification files must be yaml ({", ".join(YAML_SUFFIXES)}). '
                         f'You provided {path}.')
    return path


class Specification:
    """A run specification made of named, immutable dataclass sections.

    Subclasses declare their sections in ``sections`` as ``(name, type)``
    pairs and take one keyword argument per section in ``__init__``. The
    yaml layout mirrors the sections: one mapping per section name, every
    key optional.

    """
    sections: Tuple[Tuple[str, Type], ...] = ()

    @classmethod
    def from_path(cls, specification_path: Union[str, Path]) -> Specification:
        """Builds the specification from a yaml file."""
        with yaml_path(specification_path).open() as f:
            spec_dict = yaml.safe_load(f)
        return cls.from_dict(spec_dict)

    @classmethod
    def from_dict(cls, spec_dict: Optional[Dict[str, Any]]) -> Specification:
        """Builds the specification from a dictionary of section mappings.

        Raises
        ------
        ValueError
            If the dictionary has sections this specification does not know
            or a section has keys its dataclass does not take.

        """
        spec_dict = spec_dict or {}
        section_names = [name for name, _ in cls.sections]
        unknown = sorted(set(spec_dict) - set(section_names))
        if unknown:
            raise ValueError(f'Unknown specification sections {unknown}. '
                             f'Options are {section_names}.')

        sections = {}
        for name, section_type in cls.sections:
            try:
                sections[name] = section_type(**(spec_dict.get(name) or {}))
            except TypeError as e:
                raise ValueError(f'Invalid {name} section: {e}') from e
        return cls(**sections)

    def replace(self, section: str, **changes) -> Specification:
        """Returns a copy with fields of one section replaced."""
        sections = {name: getattr(self, name) for name, _ in self.sections}
        sections[section] = replace_(sections[section], **changes)
        return type(self)(**sections)

    def to_dict(self) -> Dict[str, Dict]:
        return {name: asdict(getattr(self, name)) for name, _ in self.sections}

    def dump(self, path: Union[str, Path]) -> None:
        """Writes this specification to a yaml file."""
        with yaml_path(path).open('w') as f:
            yaml.dump(self.to_dict(), f, sort_keys=False)

    def __repr__(self):
        return f'{self.__class__.__name__}(\n{pformat(self.to_dict())}\n)'


def asdict(data_class) -> Dict:
    """Type coerce items for easy serialization"""
    data = asdict_(data_class)
    return {k: _coerce(v) for k, v in data.items()}


def _coerce(value):
    if isinstance(value, (tuple, list)):
        return [_coerce(v) for v in value]
    elif isinstance(value, dict):
        return {k: _coerce(v) for k, v in value.items()}
    elif isinstance(value, np.ndarray):
        return value.tolist()
    elif isinstance(value, datetime.date):
        return value.isoformat()
    return value
