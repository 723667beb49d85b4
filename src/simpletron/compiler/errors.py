class CompileError(Exception):
    def __init__(self, msg, line=None):
        self.line = line
        super().__init__(msg)
