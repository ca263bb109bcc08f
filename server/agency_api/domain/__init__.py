"""Pure seat-inventory, occupancy and pricing engine.

Nothing in this package touches the database or the web layer; services feed
it plain values and persist what it returns.
"""
