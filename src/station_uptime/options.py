from dataclasses import dataclass


@dataclass
class Options:
    """Configuration for parsing reports and emitting station results."""

    # Treat any status other than true/True (or a missing one) as down
    lenient_status: bool = False
    # Emit stations with no reporting time as 0% instead of dropping them
    include_unreported: bool = True
