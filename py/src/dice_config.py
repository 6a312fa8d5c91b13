# Configuration and constants for the dice parser.

# Characters that lex as operator tokens. `D` is folded to `d`.
ARITHMETIC_OPERATORS = "+-*/"
DICE_OPERATOR = "d"
DICE_OPERATOR_ALIASES = "dD"
OPEN_PAREN = "("
CLOSE_PAREN = ")"

# Binding powers, higher binds tighter.
SUM_BIND_POWER = 10
PRODUCT_BIND_POWER = 20
DICE_BIND_POWER = 30

# Lowest face on any die.
DIE_MIN_FACE = 1

ROLL_LOG_SEPARATOR = ", "
ROLL_LOG_EMPTY = "No dice rolled"
