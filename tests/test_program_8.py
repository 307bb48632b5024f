from pathlib import Path

from indoscript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_truthiness(capsys):
    with open(EXAMPLES / 'program_8.indos', 'r', encoding='utf-8') as f:
        source = f.read()
    statements, had_error = parse_program(source)
    assert not had_error
    interp = Interpreter()
    assert interp.interpret(statements) is False
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['cadangan', '5', 'benar', 'benar', 'salah', 'salah', 'benar']
