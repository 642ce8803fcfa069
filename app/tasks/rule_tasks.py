"""
Celery tasks for rule and power-up generation.
"""

from typing import Optional

from app.core.celery_app import celery_app
from app.core.logging_config import get_logger
from app.models import Rule
from app.services.rule_generator import CatalogRuleGenerator, RuleKind, pick_rule

logger = get_logger(__name__)


@celery_app.task(name="generate_rule")
def generate_rule_task(kind: str, hint: Optional[str] = None, previous: Optional[dict] = None):
    """
    Async task to pick a rule for a King-of-the-Court variant.

    Returns:
        dict: {"success": bool, "rule": {...}} or {"success": False, "error": ...}
    """
    try:
        rule_kind = RuleKind(kind)
    except ValueError:
        return {"success": False, "error": f"Unknown rule kind: {kind}"}

    result = pick_rule(CatalogRuleGenerator(), rule_kind, hint, previous=Rule.from_dict(previous))
    if not result.success:
        logger.error("Rule task failed: %s", result.error)
        return {"success": False, "error": result.error, "error_kind": result.error_kind.value}

    return {"success": True, "rule": result.data.to_dict()}
