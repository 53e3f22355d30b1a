"""
Pneuma - On-chain interaction layer for Oraculum.

Provides ABI parsing, the type-directed codec, an async JSON-RPC client and
the RemoteHandle that binds one contract to one signing capability.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
