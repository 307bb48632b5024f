from pathlib import Path

from indoscript.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_block_scope(capsys):
    with open(EXAMPLES / 'program_4.indos', 'r', encoding='utf-8') as f:
        source = f.read()
    statements, had_error = parse_program(source)
    assert not had_error
    interp = Interpreter()
    assert interp.interpret(statements) is False
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['dalam', 'diubah']
