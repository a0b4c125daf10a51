"""
Pneuma - On-chain interaction layer for obol.

Provides the JSON-RPC client and the transfer pipeline: gas pricing and
estimation, nonce lookup, balance check, signing, broadcast and confirmation.

Uses httpx + eth-account instead of the heavyweight web3.py.
"""
