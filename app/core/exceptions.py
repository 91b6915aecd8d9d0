# app/core/exceptions.py
# 业务异常：统一由 main.py 中的 handler 转成 {"error": ...} JSON

class FeedbackServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class MissingInputError(FeedbackServiceError):
    status_code = 400

class CreditsExhaustedError(FeedbackServiceError):
    status_code = 429

class StoreUnavailableError(FeedbackServiceError):
    status_code = 500
