"""Reference programs built through the session API."""

from __future__ import annotations

from .instructions import Qualifier, TypeKind
from .session import BuilderSession


def build_fragment_shader(session: BuilderSession) -> BuilderSession:
    """Trace the three-armed fragment shader used for smoke testing.

    Equivalent host code::

        if flag_a:   fragment = vec4(1.0)
        elif flag_b: fragment = vec4(0.5)
        else:        fragment = vec4(0.1)

    Comparisons are not part of the instruction set, so the conditions are
    boolean inputs bound at slots 0 and 1.
    """

    flag_a = session.declare_global(TypeKind.BOOL, 0, Qualifier.IN)
    flag_b = session.declare_global(TypeKind.BOOL, 1, Qualifier.IN)

    with session.conditional(flag_a):
        session.store_output(0, session.construct_vec4([1.0]))
        session.open_elif(flag_b)
        session.store_output(0, session.construct_vec4([0.5]))
        session.open_elif()
        session.store_output(0, session.construct_vec4([0.1]))
    return session


__all__ = ["build_fragment_shader"]
