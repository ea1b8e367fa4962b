"""treelox: a tree-walking interpreter for a small C-like scripting language.

For reference:
- "syntax": source text to syntax tree (treelox/syntax)
- "runtime": syntax tree to behaviour (treelox/runtime)
- "lang": sessions, the shell and error reporting (treelox/lang)

Basic program flow:
    1. Scanner: turns source text into tokens, reporting lexical errors as it goes
    2. Parser: recursive descent over the tokens, producing a list of statements
        - Syntax errors are reported and the parser resynchronizes at the next statement
    3. Resolver: walks the produced tree once, recording how far each local variable reference is from its declaration
    4. Interpreter: walks the tree again, this time executing it
"""

__version__ = "0.1.0"
