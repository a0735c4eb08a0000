"""Numerical functions used for costs, levels and prices."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping

from .tables import TableSource


def _i32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 0x80000000 else value


def _mul(*factors: int) -> int:
    result = factors[0]
    for factor in factors[1:]:
        result = _i32(result * factor)
    return result


def _quot(dividend: int, divisor: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(dividend) // abs(divisor)
    return _i32(quotient if (dividend >= 0) == (divisor >= 0) else -quotient)


class FunctionKind(enum.Enum):
    LINEAR = "linear"
    MONOMIAL = "monomial"
    LINEAR_PERMIL = "linear_permil"
    POLYNOMIAL_THIRD = "polynomial_third"
    POLYNOMIAL_THIRD_PERMIL = "polynomial_third_permil"


@dataclass(frozen=True)
class NumericalFunc:
    kind: FunctionKind | None
    params: tuple[int, ...] = ()

    def evaluate(self, value: int) -> int:
        """Evaluate the function with 32-bit integer arithmetic."""
        p = self.params
        if self.kind is FunctionKind.LINEAR:
            return _i32(p[1] + _mul(p[0], value))
        if self.kind is FunctionKind.MONOMIAL:
            base = _i32(value - 1)
            result = base
            if p[1] > 1:
                for _ in range(p[1] - 1):
                    result = _i32(result * base)
            return _i32(result * p[0])
        if self.kind is FunctionKind.LINEAR_PERMIL:
            return _i32(_quot(_mul(p[0], value), 1000) + p[1])
        if self.kind is FunctionKind.POLYNOMIAL_THIRD:
            inner = _i32(p[1] + _mul(p[0], value))
            inner = _i32(p[2] + _mul(inner, value))
            return _i32(p[3] + _mul(inner, value))
        if self.kind is FunctionKind.POLYNOMIAL_THIRD_PERMIL:
            total = _quot(_mul(p[0], value, value, value), 1000)
            total = _i32(total + _quot(_mul(p[1], value, value), 1000))
            total = _i32(total + _quot(_mul(p[2], value), 1000))
            return _i32(total + p[3])
        return 0


@dataclass
class FunctionResolver:
    functions: dict[int, NumericalFunc] = field(default_factory=dict)

    def resolve(self, function_id: int) -> NumericalFunc | None:
        return self.functions.get(function_id)


def load_function_resolver(
    source: TableSource, kinds: Mapping[int, FunctionKind]
) -> FunctionResolver:
    """Load numerical functions; ``kinds`` maps raw function types to kinds."""
    function_rows = source.read("EntityMNumericalFunctionTable.json")
    parameter_rows = source.read("EntityMNumericalFunctionParameterGroupTable.json")

    params_by_group: dict[int, list[tuple[int, int]]] = {}
    for row in parameter_rows:
        params_by_group.setdefault(int(row.get("NumericalFunctionParameterGroupId", 0)), []).append(
            (int(row.get("ParameterIndex", 0)), int(row.get("ParameterValue", 0)))
        )
    for group in params_by_group.values():
        group.sort(key=lambda entry: entry[0])

    functions: dict[int, NumericalFunc] = {}
    for row in function_rows:
        group = params_by_group.get(int(row.get("NumericalFunctionParameterGroupId", 0)), [])
        params = [0] * len(group)
        for index, value in group:
            if 0 <= index < len(params):
                params[index] = value
        functions[int(row.get("NumericalFunctionId", 0))] = NumericalFunc(
            kind=kinds.get(int(row.get("NumericalFunctionType", 0))),
            params=tuple(params),
        )
    return FunctionResolver(functions)