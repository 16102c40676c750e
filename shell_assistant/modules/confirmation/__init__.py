"""
Confirmation Module
Gates execution of generated commands behind the user's explicit choice
"""
from .gate import ConfirmationGate, GateState, GateStateError, UserAction, resolve

__all__ = ['ConfirmationGate', 'GateState', 'GateStateError', 'UserAction', 'resolve']
