from .shape_tracer import ShapeTracer, analyze, analyze_and_trace

__all__ = ["ShapeTracer", "analyze", "analyze_and_trace"]
