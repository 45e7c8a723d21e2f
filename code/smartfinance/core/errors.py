class SmartFinanceError(Exception):
    """Base class for every error raised by the advisor."""


class ValidationError(SmartFinanceError):
    """User input failed a wizard guard (income, topic selection, field value)."""


class AdviceGenerationFailed(SmartFinanceError):
    """The advice backend could not produce a usable AnalysisResult."""


class WizardStateError(SmartFinanceError):
    pass


class InvalidTransitionError(WizardStateError):
    pass


class WizardBusyError(WizardStateError):
    """Raised when the wizard is waiting on an advice request."""
