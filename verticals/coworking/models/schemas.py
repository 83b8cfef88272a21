"""Pydantic schemas for pricing-rule request/response validation.

Input models mirror the persisted rule JSON (camelCase keys such as
``defaultValue`` and ``elseFormula``); snake_case names are accepted too.
Each definition model converts to the immutable core dataclasses via
``to_definition()``.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.pricing import (
    Comparator,
    Condition,
    NumberLiteral,
    PriceRuleDefinition,
    PriceRuleVariable,
    VariableRef,
)
from core.pricing.variables import normalize_key
from verticals.coworking.config import config


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Rule definition
# ---------------------------------------------------------------------------

class LiteralOperand(BaseModel):
    kind: Literal["literal"]
    value: float = Field(..., allow_inf_nan=False)

    def to_operand(self) -> NumberLiteral:
        return NumberLiteral(self.value)


class VariableOperand(BaseModel):
    kind: Literal["variable"]
    key: str = Field(..., min_length=1)

    @field_validator("key")
    @classmethod
    def _strip_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Variable key must not be blank.")
        return v.strip()

    def to_operand(self) -> VariableRef:
        return VariableRef(self.key)


OperandSchema = Annotated[Union[LiteralOperand, VariableOperand], Field(discriminator="kind")]


class ConditionSchema(BaseModel):
    left: OperandSchema
    operator: Comparator
    right: OperandSchema
    negated: bool = False

    def to_condition(self) -> Condition:
        return Condition(
            left=self.left.to_operand(),
            operator=self.operator,
            right=self.right.to_operand(),
            negated=self.negated,
        )


class VariableSchema(_CamelModel):
    key: str = Field(..., min_length=1, max_length=64)
    default_value: float = Field(0.0, alias="defaultValue", allow_inf_nan=False)


class PriceRuleDefinitionSchema(_CamelModel):
    variables: list[VariableSchema] = Field(default_factory=list)
    conditions: list[ConditionSchema] = Field(
        default_factory=list, max_length=config.pricing.max_conditions
    )
    formula: str = Field(..., min_length=1)
    else_formula: Optional[str] = Field(None, alias="elseFormula")

    @field_validator("variables")
    @classmethod
    def _unique_keys(cls, v: list[VariableSchema]) -> list[VariableSchema]:
        seen = set()
        for variable in v:
            key = normalize_key(variable.key)
            if not key:
                raise ValueError("Variable key must not be blank.")
            if key in seen:
                raise ValueError(f'Duplicate variable key "{variable.key}".')
            seen.add(key)
        return v

    @field_validator("formula")
    @classmethod
    def _formula_not_blank(cls, v: str) -> str:
        # Syntax is only checked by the validate endpoint; evaluation stays total
        if not v.strip():
            raise ValueError("Add a formula to determine the price.")
        return v

    @field_validator("else_formula")
    @classmethod
    def _blank_else_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    def to_definition(self) -> PriceRuleDefinition:
        return PriceRuleDefinition(
            variables=[PriceRuleVariable(v.key, v.default_value) for v in self.variables],
            conditions=[c.to_condition() for c in self.conditions],
            formula=self.formula,
            else_formula=self.else_formula,
        )


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class EvaluateRequest(_CamelModel):
    definition: PriceRuleDefinitionSchema
    booking_hours: float = Field(
        ...,
        alias="bookingHours",
        ge=config.pricing.min_booking_hours,
        le=config.pricing.max_booking_hours,
    )
    guest_count: int = Field(1, alias="guestCount", ge=1, le=config.pricing.max_guest_count)
    variable_overrides: dict[str, float] = Field(default_factory=dict, alias="variableOverrides")
    start_at: Optional[datetime] = Field(None, alias="startAt")


class ValidateRequest(BaseModel):
    definition: PriceRuleDefinitionSchema


class PriceRuleRecord(_CamelModel):
    name: Optional[str] = None
    definition: Optional[PriceRuleDefinitionSchema] = None
    is_active: bool = Field(True, alias="isActive")


class AreaPricing(_CamelModel):
    name: Optional[str] = None
    price_rule: Optional[PriceRuleRecord] = Field(None, alias="priceRule")


class StartingPriceRequest(BaseModel):
    areas: list[AreaPricing] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class ConditionOutcome(BaseModel):
    passed: bool
    message: str


class EvaluateResponse(BaseModel):
    price: Optional[float] = None
    unit_price: Optional[float] = None
    branch: str
    applied_expression: Optional[str] = None
    conditions_satisfied: bool = False
    used_variables: list[str] = Field(default_factory=list)
    guest_multiplier_applied: bool = False
    conditions: list[ConditionOutcome] = Field(default_factory=list)


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


class StartingPriceResponse(BaseModel):
    starting_price: Optional[float] = None
