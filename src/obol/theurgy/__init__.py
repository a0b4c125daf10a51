"""
Theurgy - Command implementations for obol.

- genesis:  Create the operator wallet and default config
- identity: whoami / info
- balance:  Query an ETH balance
- gas:      Show gas price and the fee of a plain transfer
- send:     Run the transfer pipeline
"""
