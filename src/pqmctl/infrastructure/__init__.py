"""Infrastructure layer — JSON-RPC transport, descriptor loading, ABI codec,
and the contract client built on top of them.
"""
