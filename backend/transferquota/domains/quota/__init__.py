"""Transfer quota domain: the usage ledger and its threshold state machine."""
