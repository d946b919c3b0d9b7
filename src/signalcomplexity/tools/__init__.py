"""Development helpers.

:mod:`debug` provides the ``SIGNALCOMPLEXITY_DEBUG``-gated timing context
manager wrapped around every ``analyze`` call.
"""
