"""
ARC Policy API Server

Exposes the ARC policy engine over REST: rule listing, configuration
validation, ad-hoc resource evaluation and live cluster compliance.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Body, Depends, FastAPI, HTTPException, Query

# Load environment variables (ARC_POLICY_*)
load_dotenv()

from arc_policy import __version__
from arc_policy.policy import ArcPolicyEngine, PolicyEngineError
from arc_policy.policy.models import RuleScope


# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ARC Policy Service",
    description="Policy and compliance evaluation for ARC runner scale sets",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_engine() -> ArcPolicyEngine:
    """Engine shared by all requests, built on first use."""
    return ArcPolicyEngine.from_settings()


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _engine_error(e: PolicyEngineError) -> HTTPException:
    logger.error(f"Policy engine error: {e}")
    status_code = 404 if e.status_code == 404 else 502
    return HTTPException(status_code=status_code, detail=e.message)


@app.get("/")
def root(engine: ArcPolicyEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Health check."""
    return {
        "service": "ARC Policy Service",
        "status": "running",
        "rules": len(engine.get_rules()),
    }


@app.get("/rules")
def list_rules(
    category: Optional[str] = Query(default=None),
    engine: ArcPolicyEngine = Depends(get_engine),
) -> List[Dict[str, Any]]:
    """List all rules, or the rules of one category."""
    rules = engine.get_rules_by_category(category) if category else engine.get_rules()
    return [_dump(rule) for rule in rules]


@app.post("/configuration/validate")
def validate_configuration(
    config: Any = Body(default=None),
    engine: ArcPolicyEngine = Depends(get_engine),
) -> Dict[str, Any]:
    """Structurally validate a policy configuration document."""
    return _dump(engine.validate_configuration(config))


@app.post("/evaluate")
def evaluate(
    resource: Dict[str, Any] = Body(...),
    resource_type: str = Query(default=RuleScope.RUNNER_SCALE_SET.value),
    engine: ArcPolicyEngine = Depends(get_engine),
) -> Dict[str, Any]:
    """Evaluate a posted resource against the rules of a scope."""
    return _dump(engine.evaluate_resource(resource, resource_type))


@app.get("/runnerscalesets/{namespace}/{name}/evaluation")
def evaluate_runner_scale_set(
    namespace: str,
    name: str,
    engine: ArcPolicyEngine = Depends(get_engine),
) -> Dict[str, Any]:
    """Fetch a RunnerScaleSet from the cluster and evaluate it."""
    try:
        return _dump(engine.evaluate_runner_scale_set(namespace, name))
    except PolicyEngineError as e:
        raise _engine_error(e) from e


@app.get("/compliance")
def compliance_report(
    namespace: Optional[str] = Query(default=None),
    engine: ArcPolicyEngine = Depends(get_engine),
) -> Dict[str, Any]:
    """Compliance report for a namespace, or the whole cluster."""
    try:
        return _dump(engine.generate_compliance_report(namespace))
    except PolicyEngineError as e:
        raise _engine_error(e) from e
