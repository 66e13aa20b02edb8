"""State layer.

This package owns the accepted town snapshot, the change fingerprint and
the sync bookkeeping. The sync controller is the only writer.
"""
