# State package
from graphstate.state.channels import Channel, StateSchema
from graphstate.state.merger import UNSET, StateInstance, StateMerger

__all__ = ["Channel", "StateSchema", "StateInstance", "StateMerger", "UNSET"]
