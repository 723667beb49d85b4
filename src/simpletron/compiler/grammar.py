from lark import Lark

# One numbered line of Simple source
grammar = r"""
%ignore /[\t \f\r]+/  // Whitespace

NUMBER: /\d+(?:\.\d+)?/
NAME: /[a-z_][a-z0-9_]*/i
STRING: /"[^"\n]*"/
REM.2: /rem\b[^\n]*/i

line: NUMBER [statement]

?statement: rem_stmt
          | input_stmt
          | print_stmt
          | let_stmt
          | goto_stmt
          | if_stmt
          | for_stmt
          | next_stmt
          | end_stmt

rem_stmt: REM
input_stmt: "input"i target ("," target)*
print_stmt: "print"i [_item ("," _item)*]
_item: string | expr
let_stmt: "let"i target "=" expr
goto_stmt: "goto"i NUMBER
if_stmt: "if"i expr comp_op expr "goto"i NUMBER
!comp_op: "==" | "!=" | "<" | ">" | "<=" | ">="
for_stmt: "for"i NAME "=" expr "to"i expr [step]
?step: "step"i NUMBER       -> step_up
     | "step"i "-" NUMBER   -> step_down
next_stmt: "next"i NAME
end_stmt: "end"i

target: NAME ["(" expr ")"]
string: STRING

?expr: term
     | expr "+" term    -> add
     | expr "-" term    -> sub
?term: power
     | term "*" power   -> mul
     | term "/" power   -> div
     | term "%" power   -> mod
?power: unary
      | unary "^" power -> pow
?unary: primary
      | "-" unary       -> neg
      | "+" unary       -> pos
?primary: NUMBER        -> number
        | NAME          -> var
        | NAME "(" expr ")" -> element
        | "(" expr ")"
"""

l = Lark(grammar, start="line", parser="lalr")
