"""fr8coach: password-gated freight brokerage coaching gateway."""
