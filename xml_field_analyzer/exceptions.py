class XmlFieldAnalyzerError(Exception):
    pass


class ParseError(XmlFieldAnalyzerError):
    def __init__(self, message: str, filename: str = None):
        self.filename = filename
        if filename:
            message = f"{filename}: {message}"
        super().__init__(message)
