# sim/hooks.py
class NoopHooks:
    def build_start(self, **_):
        pass

    def build_end(self, **_):
        pass

    def query_start(self, **_):
        pass

    def query_end(self, **_):
        pass

    def error(self, **_):
        pass
