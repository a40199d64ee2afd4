"""
Services module for image derivatives.

Available Services:
- DerivativePipeline: Derivative generation and constraint synthesis
  (in derivative_pipeline/)
- LoggerService: Centralized loguru-based logging (in logger/)
"""
