"""bytecode-enforcer — fail the build when dependencies need a newer JVM."""

from bytecode_enforcer.config import RuleConfig
from bytecode_enforcer.models import DependencyNode, DependencyReference
from bytecode_enforcer.rule import BytecodeLevelRule

__all__ = ["BytecodeLevelRule", "DependencyNode", "DependencyReference", "RuleConfig"]
