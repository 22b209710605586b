"""
Serialization helpers for survey definitions and condition trees.

Converts between the model objects and the camelCase dict shape used by the
surrounding application (leftOperand, rightOperand, logicFallback, ...), with
JSON and YAML wrappers.

Loading is the only place in the package that raises: malformed definitions
raise LogicDefinitionError. Operator or operand names this version does not
know are kept as plain strings (with a UserWarning) so that definitions
written by newer editors still load.
"""
from __future__ import annotations

import json
import warnings
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml

from surveylogic.conditions import (
    ConditionGroup,
    ConditionNode,
    Connector,
    LeftOperand,
    OperandType,
    Operator,
    RightOperand,
    SingleCondition,
)
from surveylogic.model import (
    ActionObjective,
    CalculateOperator,
    Choice,
    LogicAction,
    LogicRule,
    Question,
    Survey,
    Variable,
)


class LogicDefinitionError(Exception):
    """Raised when a survey or condition definition cannot be loaded."""
    pass


def _require(d: Any, key: str, where: str) -> Any:
    if not isinstance(d, dict):
        raise LogicDefinitionError(f"{where} must be a mapping, got {type(d).__name__}")
    if key not in d:
        raise LogicDefinitionError(f"{where} is missing required key '{key}'")
    return d[key]


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _lenient_enum(enum_cls, raw: Any, what: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError:
        warnings.warn(f"Unknown {what} '{raw}' kept as-is", UserWarning)
        return raw


def _i18n(value: Any) -> Dict[str, str]:
    if value is None:
        return {}
    if isinstance(value, str):
        return {"default": value}
    if isinstance(value, dict):
        return dict(value)
    raise LogicDefinitionError(f"Unsupported label value: {value!r}")


# =============================================================================
# Conditions
# =============================================================================

def left_operand_from_dict(d: Any) -> LeftOperand:
    op_type = _require(d, "type", "leftOperand")
    return LeftOperand(
        type=_lenient_enum(OperandType, op_type, "operand type"),
        value=_require(d, "value", "leftOperand"),
    )


def right_operand_from_dict(d: Any) -> Optional[RightOperand]:
    if d is None:
        return None
    op_type = _require(d, "type", "rightOperand")
    return RightOperand(
        type=_lenient_enum(OperandType, op_type, "operand type"),
        value=d.get("value"),
    )


def operand_to_dict(operand) -> Any:
    if operand is None:
        return None
    return {"type": _enum_value(operand.type), "value": operand.value}


def condition_from_dict(d: Any) -> ConditionNode:
    """
    Build a condition node. A dict with a "connector" key is a group,
    anything else must be a single condition.
    """
    if not isinstance(d, dict):
        raise LogicDefinitionError(f"Condition must be a mapping, got {type(d).__name__}")

    if "connector" in d:
        connector = d["connector"]
        try:
            connector = Connector(connector)
        except ValueError:
            warnings.warn(f"Unknown connector '{connector}', treating as 'and'", UserWarning)
            connector = Connector.AND
        children = d.get("conditions") or []
        if not isinstance(children, list):
            raise LogicDefinitionError("Condition group 'conditions' must be a list")
        return ConditionGroup(
            connector=connector,
            conditions=tuple(condition_from_dict(child) for child in children),
            id=d.get("id", ""),
        )

    return SingleCondition(
        left_operand=left_operand_from_dict(_require(d, "leftOperand", "condition")),
        operator=_lenient_enum(Operator, _require(d, "operator", "condition"), "operator"),
        right_operand=right_operand_from_dict(d.get("rightOperand")),
        id=d.get("id", ""),
    )


def condition_group_from_dict(d: Any) -> ConditionGroup:
    node = condition_from_dict(d)
    if not isinstance(node, ConditionGroup):
        raise LogicDefinitionError("Root of a condition tree must be a condition group")
    return node


def condition_to_dict(node: ConditionNode) -> Dict[str, Any]:
    if isinstance(node, ConditionGroup):
        return {
            "id": node.id,
            "connector": _enum_value(node.connector),
            "conditions": [condition_to_dict(child) for child in node.conditions],
        }
    if isinstance(node, SingleCondition):
        d = {
            "id": node.id,
            "leftOperand": operand_to_dict(node.left_operand),
            "operator": _enum_value(node.operator),
        }
        if node.right_operand is not None:
            d["rightOperand"] = operand_to_dict(node.right_operand)
        return d
    raise TypeError(f"Unsupported condition node type: {type(node)}")


# =============================================================================
# Logic rules
# =============================================================================

def action_from_dict(d: Any) -> LogicAction:
    objective = _require(d, "objective", "action")
    try:
        objective = ActionObjective(objective)
    except ValueError:
        raise LogicDefinitionError(f"Unsupported action objective: {objective}")

    if objective is ActionObjective.CALCULATE:
        operator = _require(d, "operator", "calculate action")
        try:
            operator = CalculateOperator(operator)
        except ValueError:
            raise LogicDefinitionError(f"Unsupported calculate operator: {operator}")
        return LogicAction(
            objective=objective,
            target=d.get("variableId", d.get("target")) or "",
            operator=operator,
            value=right_operand_from_dict(d.get("value")),
            id=d.get("id", ""),
        )

    return LogicAction(objective=objective, target=_require(d, "target", "action"), id=d.get("id", ""))


def action_to_dict(a: LogicAction) -> Dict[str, Any]:
    if a.objective is ActionObjective.CALCULATE:
        return {
            "id": a.id,
            "objective": a.objective.value,
            "variableId": a.target,
            "operator": a.operator.value if a.operator else None,
            "value": operand_to_dict(a.value),
        }
    return {"id": a.id, "objective": a.objective.value, "target": a.target}


def rule_from_dict(d: Any) -> LogicRule:
    conditions = condition_group_from_dict(_require(d, "conditions", "logic rule"))
    return LogicRule(
        id=d.get("id", ""),
        conditions=conditions,
        actions=[action_from_dict(a) for a in d.get("actions") or []],
    )


def rule_to_dict(r: LogicRule) -> Dict[str, Any]:
    return {
        "id": r.id,
        "conditions": condition_to_dict(r.conditions),
        "actions": [action_to_dict(a) for a in r.actions],
    }


# =============================================================================
# Survey
# =============================================================================

def choice_from_dict(d: Dict[str, Any]) -> Choice:
    return Choice(id=_require(d, "id", "choice"), label=_i18n(d.get("label")))


def choice_to_dict(c: Choice) -> Dict[str, Any]:
    return {"id": c.id, "label": c.label}


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=_require(d, "id", "question"),
        type=_require(d, "type", "question"),
        headline=_i18n(d.get("headline")),
        choices=[choice_from_dict(c) for c in d.get("choices") or []],
        logic=[rule_from_dict(r) for r in d.get("logic") or []],
        logic_fallback=d.get("logicFallback"),
        required=bool(d.get("required", False)),
    )


def question_to_dict(q: Question) -> Dict[str, Any]:
    d = {
        "id": q.id,
        "type": q.type,
        "headline": q.headline,
        "required": q.required,
        "logic": [rule_to_dict(r) for r in q.logic],
    }
    if q.choices:
        d["choices"] = [choice_to_dict(c) for c in q.choices]
    if q.logic_fallback is not None:
        d["logicFallback"] = q.logic_fallback
    return d


def variable_from_dict(d: Dict[str, Any]) -> Variable:
    return Variable(
        id=_require(d, "id", "variable"),
        name=d.get("name", ""),
        type=d.get("type", "text"),
        value=d.get("value"),
    )


def variable_to_dict(v: Variable) -> Dict[str, Any]:
    return {"id": v.id, "name": v.name, "type": v.type, "value": v.value}


def _hidden_fields_from(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, dict):
        if value.get("enabled") is False:
            return []
        return list(value.get("fieldIds") or [])
    if isinstance(value, list):
        return list(value)
    raise LogicDefinitionError(f"Unsupported hiddenFields value: {value!r}")


def _ending_id(value: Any) -> str:
    if isinstance(value, dict):
        return _require(value, "id", "ending")
    return value


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "name": s.name,
        "questions": [question_to_dict(q) for q in s.questions],
        "variables": [variable_to_dict(v) for v in s.variables],
        "hiddenFields": {"enabled": True, "fieldIds": list(s.hidden_fields)},
        "endings": [{"id": e} for e in s.endings],
        "languages": list(s.languages),
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    if not isinstance(d, dict):
        raise LogicDefinitionError(f"Survey must be a mapping, got {type(d).__name__}")
    s = Survey(name=d.get("name", ""))
    s.questions = [question_from_dict(q) for q in d.get("questions") or []]
    s.variables = [variable_from_dict(v) for v in d.get("variables") or []]
    s.hidden_fields = _hidden_fields_from(d.get("hiddenFields"))
    s.endings = [_ending_id(e) for e in d.get("endings") or []]
    s.languages = list(d.get("languages") or [])
    return s


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)
