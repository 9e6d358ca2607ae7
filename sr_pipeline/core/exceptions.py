#!/usr/bin/env python3
"""
Custom exceptions for the SR Pipeline
All exceptions follow the FAIL LOUD philosophy - verbose, informative errors
"""

import sys
import traceback
from typing import Optional, Dict, Any

class SRPipelineError(Exception):
    """Base exception for all SR Pipeline errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize exception with message and optional details

        Args:
            message: Error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}

        # Build detailed error message
        full_message = f"\n{'=' * 70}\n"
        full_message += "SR PIPELINE ERROR\n"
        full_message += f"{'=' * 70}\n\n"
        full_message += f"ERROR: {message}\n"

        if self.details:
            full_message += "\nDETAILS:\n"
            if isinstance(self.details, dict):
                for key, value in self.details.items():
                    full_message += f"  {key}: {value}\n"
            else:
                full_message += f"  {self.details}\n"

        full_message += f"\n{'=' * 70}\n"

        super().__init__(full_message)


class ConfigurationError(SRPipelineError):
    """Raised when configuration is invalid or missing"""
    pass


class ScaleError(SRPipelineError, ValueError):
    """Raised when a scale request violates the planner contract"""

    def __init__(self, parameter: str, value: Any, requirement: str):
        self.parameter = parameter
        self.value = value
        details = {
            "Parameter": parameter,
            "Value": value,
            "Requirement": requirement
        }
        super().__init__(f"Invalid {parameter}: {value!r}", details)


class ModelError(SRPipelineError):
    """Base exception for model-related errors"""
    pass


class ModelNotFoundError(ModelError):
    """Raised when a required model cannot be found"""

    def __init__(self, model_name: str, search_paths: list):
        details = {
            "Model": model_name,
            "Searched paths": "\n    ".join(str(p) for p in search_paths) or "(none)",
            "Suggestion": "Check the model installation or update paths in config/models.yaml"
        }
        super().__init__(f"Model '{model_name}' not found in any configured path", details)


class ModelLoadError(ModelError):
    """Raised when a model fails to load"""

    def __init__(self, model_name: str, error: Exception):
        details = {
            "Model": model_name,
            "Error type": type(error).__name__,
            "Error message": str(error),
        }
        super().__init__(f"Failed to load model '{model_name}'", details)


class ModelInferenceError(ModelError):
    """Raised when a single model pass fails"""

    def __init__(self, model_name: str, error: Exception, input_size: Optional[tuple] = None):
        self.model_name = model_name
        self.error = error
        details = {
            "Model": model_name,
            "Input size": f"{input_size[0]}x{input_size[1]}" if input_size else "N/A",
            "Error type": type(error).__name__,
            "Error message": str(error),
        }
        super().__init__(f"Super-resolution pass failed with '{model_name}'", details)


class ResizeError(SRPipelineError):
    """Raised when the residual resize cannot be performed"""

    def __init__(self, source_size: tuple, target_size: tuple, reason: str):
        self.source_size = source_size
        self.target_size = target_size
        details = {
            "Source size": f"{source_size[0]}x{source_size[1]}",
            "Target size": f"{target_size[0]}x{target_size[1]}",
            "Reason": reason
        }
        super().__init__("Residual resize failed", details)


class LoggingError(SRPipelineError):
    """Raised when logging setup or operations fail"""

    def __init__(self, operation: str, error: str, resolution: str = ""):
        message = (
            f"LOGGING FAILURE: {operation}\n"
            f"Error: {error}"
        )
        if resolution:
            message += f"\nResolution: {resolution}"

        super().__init__(message)


def handle_error(error: Exception, context: str = "") -> None:
    """Report a fatal error and exit

    Args:
        error: The exception that occurred
        context: Additional context about what was happening
    """
    print("\n" + "!" * 70, file=sys.stderr)
    print("FATAL ERROR - CANNOT CONTINUE", file=sys.stderr)
    print("!" * 70, file=sys.stderr)

    if context:
        print(f"\nCONTEXT: {context}", file=sys.stderr)

    if isinstance(error, SRPipelineError):
        # Our custom errors already have detailed formatting
        print(str(error), file=sys.stderr)
    else:
        print(f"\nERROR TYPE: {type(error).__name__}", file=sys.stderr)
        print(f"ERROR MESSAGE: {str(error)}", file=sys.stderr)
        print("\nFULL TRACEBACK:", file=sys.stderr)
        print(traceback.format_exc(), file=sys.stderr)

    print("!" * 70 + "\n", file=sys.stderr)

    sys.exit(1)
