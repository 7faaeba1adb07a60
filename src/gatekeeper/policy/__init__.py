"""Authorization policy contract and batch evaluation."""

from gatekeeper.policy.base import (
    AuthorizationPolicy,
    ConditionalPolicyResult,
    DefinitivePolicyResult,
    Identity,
    PolicyResult,
)
from gatekeeper.policy.batch import MalformedRequestError, evaluate_batch

__all__ = [
    "AuthorizationPolicy",
    "ConditionalPolicyResult",
    "DefinitivePolicyResult",
    "Identity",
    "MalformedRequestError",
    "PolicyResult",
    "evaluate_batch",
]
