"""
Parametrizations
================

Named parameter sets of a family with declarative constraints.

A parametrization is a frozen dataclass whose fields are the shape parameters.
Field values are converted to extended-precision scalars on construction, and
constraint methods marked with :func:`constraint` are checked by
:meth:`Parametrization.validate`. A family may offer several parametrizations;
all of them convert to its base parametrization.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from abc import ABC
from dataclasses import dataclass, fields, is_dataclass
from functools import wraps
from inspect import isfunction
from typing import TYPE_CHECKING, ParamSpec

from mpmath import mp

from pysatl_hiprec.errors import ParameterError
from pysatl_hiprec.precision import to_scalar
from pysatl_hiprec.types import ParametrizationName

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any, ClassVar

    from pysatl_hiprec.families.parametric_family import ParametricFamily
    from pysatl_hiprec.types import Scalar

_CONSTRAINT_MARK = "__is_constraint"
_CONSTRAINT_DESCRIPTION = "__constraint_description"


@dataclass(slots=True, frozen=True)
class ParametrizationConstraint:
    """
    A named predicate on parameter values.

    Parameters
    ----------
    description : str
        The condition in readable form, e.g. ``"alpha > 0"``; quoted in the
        error raised when the check fails.
    check : Callable[[Any], bool]
        Predicate over the parametrization instance.
    """

    description: str
    check: Callable[[Any], bool]


class Parametrization(ABC):
    """
    Base class of the parametrizations of a family.

    Subclasses declare the shape parameters as dataclass fields. Every value
    becomes an ``mpf``; only finite values satisfying all constraints pass
    :meth:`validate`.
    """

    # Set by the @parametrization decorator
    __family__: ClassVar[ParametricFamily]
    __param_name__: ClassVar[ParametrizationName]

    _constraints: ClassVar[list[ParametrizationConstraint]] = []

    def __post_init__(self) -> None:
        for key, value in self.parameters.items():
            try:
                scalar = to_scalar(value)
            except TypeError as exc:
                raise ParameterError(
                    f"Parameter {key} must be a real number, got {value!r}"
                ) from exc
            object.__setattr__(self, key, scalar)

    @property
    def name(self) -> str:
        return type(self).__param_name__

    @property
    def parameters(self) -> dict[str, Scalar]:
        """Parameter values by field name, in declaration order."""
        if is_dataclass(self):
            return {field.name: getattr(self, field.name) for field in fields(self)}
        return {key: getattr(self, key) for key in getattr(self, "__annotations__", {})}

    @property
    def constraints(self) -> list[ParametrizationConstraint]:
        return self._constraints

    def validate(self) -> None:
        """
        Check finiteness of every value, then every declared constraint.

        Raises
        ------
        ParameterError
            Naming the first condition that does not hold.
        """
        for key, value in self.parameters.items():
            if not mp.isfinite(value):
                raise ParameterError(f'Constraint "{key} is finite" does not hold')
        failed = next((c for c in self._constraints if not c.check(self)), None)
        if failed is not None:
            raise ParameterError(f'Constraint "{failed.description}" does not hold')

    def transform_to_base_parametrization(self) -> Parametrization:
        """
        Equivalent parameters in the base parametrization of the family.

        Alternative parametrizations override this; the base one is returned
        unchanged.
        """
        return self


P = ParamSpec("P")


def constraint(description: str) -> Callable[[Callable[P, bool]], Callable[P, bool]]:
    """
    Mark an instance method of a parametrization as a constraint.

    Parameters
    ----------
    description : str
        The condition in readable form.

    Notes
    -----
    The marks are the function attributes ``__is_constraint`` and
    ``__constraint_description``; :func:`parametrization` collects marked
    methods when the class is registered.
    """

    def decorator(func: Callable[P, bool]) -> Callable[P, bool]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> bool:
            return func(*args, **kwargs)

        setattr(wrapper, _CONSTRAINT_MARK, True)
        setattr(wrapper, _CONSTRAINT_DESCRIPTION, description)
        return wrapper

    return decorator


def _collect_constraints(cls: type[Parametrization]) -> list[ParametrizationConstraint]:
    """Constraints declared directly on ``cls``, in definition order."""
    collected: list[ParametrizationConstraint] = []
    for attr_name, attr in cls.__dict__.items():
        for kind in (staticmethod, classmethod):
            if isinstance(attr, kind):
                raise TypeError(
                    f"@constraint '{attr_name}' must be an instance method, not @{kind.__name__}"
                )
        if isfunction(attr) and getattr(attr, _CONSTRAINT_MARK, False):
            description = getattr(attr, _CONSTRAINT_DESCRIPTION, attr.__name__)
            collected.append(ParametrizationConstraint(description=description, check=attr))
    return collected


def parametrization(
    *,
    family: ParametricFamily,
    name: str,
) -> Callable[[type[Parametrization]], type[Parametrization]]:
    """
    Class decorator registering a parametrization of ``family`` as ``name``.

    The class is turned into a frozen, slotted dataclass unless it already is
    a dataclass, and its ``@constraint`` methods are collected.
    """

    def decorator(cls: type[Parametrization]) -> type[Parametrization]:
        if not is_dataclass(cls):
            cls = dataclass(slots=True, frozen=True)(cls)
        cls.__family__ = family
        cls.__param_name__ = name
        cls._constraints = _collect_constraints(cls)
        family.register_parametrization(name, cls)
        return cls

    return decorator
