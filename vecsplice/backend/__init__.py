"""Native splice kernels: element kinds, IR generation and the JIT engine."""
