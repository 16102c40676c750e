"""
Safety Module
Classifies generated commands by risk under the organization's policy
"""
from .classifier import (
    CommandSafetyClassifier,
    PolicyConfig,
    SafetyLevel,
    SafetyVerdict,
    classify_command,
)

__all__ = ['CommandSafetyClassifier', 'PolicyConfig', 'SafetyLevel', 'SafetyVerdict', 'classify_command']
