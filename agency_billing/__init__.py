"""Agency billing ledger service"""
