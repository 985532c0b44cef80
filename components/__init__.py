from .component import Component, ComponentType, LOAD_TYPES, NetlistError, make_component, next_label
from .wire import Pin, Wire, can_connect, connect

__all__ = ['Component', 'ComponentType', 'LOAD_TYPES', 'NetlistError', 'make_component', 'next_label',
           'Pin', 'Wire', 'can_connect', 'connect']
