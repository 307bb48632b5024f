import io

import pytest

from indoscript import ast
from indoscript.interpreter import Interpreter, parse_program, run_program


def run(source, interp=None):
    """Run ``source`` and return (stdout lines, stderr text, had_runtime_error)."""
    out, err = io.StringIO(), io.StringIO()
    statements, had_error = parse_program(source, err)
    assert not had_error, err.getvalue()
    if interp is None:
        interp = Interpreter(stdout=out, stderr=err)
    else:
        interp.stdout, interp.stderr = out, err
    failed = interp.interpret(statements)
    return out.getvalue().splitlines(), err.getvalue(), failed


def test_arithmetic():
    lines, _, failed = run('cetak 1 + 2 * 3; cetak 8 - 3 - 2; cetak 7 / 2; cetak -(4);')
    assert not failed
    assert lines == ['7', '3', '3.5', '-4']


def test_string_concatenation_and_type_error():
    lines, err, failed = run('cetak "a" + "b"; cetak "a" + 1; cetak "tidak";')
    assert failed
    assert lines == ['ab']
    assert err == "[line 1] Runtime error: '+' - operands must be either numbers or strings\n"


@pytest.mark.parametrize('source, message', [
    ('cetak 1 - "a";', "'-' - operands must be numbers"),
    ('cetak "a" * 2;', "'*' - operands must be numbers"),
    ('cetak benar / 2;', "'/' - operands must be numbers"),
    ('cetak 1 < "2";', "'<' - operands must be numbers"),
    ('cetak kosong >= 1;', "'>=' - operands must be numbers"),
    ('cetak -"a";', "'-' - operand must be a number"),
])
def test_type_errors_name_the_operator(source, message):
    _, err, failed = run(source)
    assert failed
    assert err == f"[line 1] Runtime error: {message}\n"


def test_division_by_zero_follows_ieee():
    lines, err, failed = run('cetak 1 / 0; cetak -1 / 0; cetak 0 / 0; cetak 1 / -0; cetak 1 / 0 > 1000;')
    assert not failed
    assert err == ''
    assert lines == ['+Inf', '-Inf', 'NaN', '-Inf', 'benar']


def test_comparisons():
    lines, _, _ = run('cetak 1 < 2; cetak 2 <= 2; cetak 1 > 2; cetak 3 >= 4;')
    assert lines == ['benar', 'benar', 'salah', 'salah']


def test_equality_never_coerces():
    source = '''
    cetak 1 == "1";
    cetak 1 == benar;
    cetak 0 == salah;
    cetak kosong == salah;
    cetak kosong == kosong;
    cetak "a" == "a";
    cetak 2 != 2;
    '''
    lines, _, _ = run(source)
    assert lines == ['salah', 'salah', 'salah', 'salah', 'benar', 'benar', 'salah']


def test_functions_compare_by_identity():
    source = '''
    fungsi f() { }
    fungsi g() { }
    misal h = f;
    cetak f == h;
    cetak f == g;
    '''
    lines, _, _ = run(source)
    assert lines == ['benar', 'salah']


def test_truthiness():
    source = '''
    jika 0 { cetak "a"; } lain { cetak "b"; }
    jika "" { cetak "a"; } lain { cetak "b"; }
    jika kosong { cetak "a"; } lain { cetak "b"; }
    jika -1 { cetak "a"; } lain { cetak "b"; }
    jika "0" { cetak "a"; } lain { cetak "b"; }
    cetak !!3;
    cetak !"";
    '''
    lines, _, _ = run(source)
    assert lines == ['b', 'b', 'b', 'a', 'a', 'benar', 'benar']


def test_logical_operators_return_operand_values():
    lines, _, _ = run('cetak 0 atau ""; cetak 2 dan "x"; cetak "" dan 1; cetak 3 atau 4;')
    assert lines == ['', 'x', '', '3']


def test_short_circuit_skips_right_operand():
    # the right operand would raise if evaluated
    lines, err, failed = run('cetak salah dan tidakAda(); cetak benar atau tidakAda();')
    assert not failed, err
    assert lines == ['salah', 'benar']


def test_block_variable_is_unreachable_after_block():
    lines, err, failed = run('{ misal dalam = 1; cetak dalam; }\ncetak dalam;')
    assert failed
    assert lines == ['1']
    assert err == "[line 2] Runtime error: 'dalam' - undefined variable dalam\n"


def test_nested_assignment_mutates_enclosing_binding():
    source = '''
    misal a = 1;
    {
      {
        a = 2;
      }
    }
    cetak a;
    '''
    lines, _, _ = run(source)
    assert lines == ['2']


def test_bare_assignment_of_fresh_name_declares_locally():
    lines, err, failed = run('{ baru = 5; cetak baru; }\ncetak baru;')
    assert failed
    assert lines == ['5']
    assert 'undefined variable baru' in err


def test_shadowing_inside_block():
    lines, _, _ = run('misal a = "luar"; { misal a = "dalam"; cetak a; } cetak a;')
    assert lines == ['dalam', 'luar']


def test_loop_iterations_get_fresh_scope():
    source = '''
    misal i = 0;
    selama i < 2 {
      jika i == 1 { cetak sisa; }
      misal sisa = "ada";
      i = i + 1;
    }
    '''
    lines, err, failed = run(source)
    assert failed
    assert lines == []
    assert "'sisa' - undefined variable sisa" in err


def test_loop_body_mutates_outer_variables():
    lines, _, _ = run('misal n = 3; misal total = 0; selama n > 0 { total = total + n; n = n - 1; } cetak total;')
    assert lines == ['6']


def test_return_from_nested_loop_and_block():
    source = '''
    fungsi cari(batas) {
      misal i = 0;
      selama benar {
        {
          jika i == batas { balikin i * 10; }
        }
        i = i + 1;
      }
    }
    cetak cari(4);
    '''
    lines, _, failed = run(source)
    assert not failed
    assert lines == ['40']


def test_return_without_value_and_implicit_return_yield_nil():
    lines, _, _ = run('fungsi a() { balikin; } fungsi b() { } cetak a(); cetak b();')
    assert lines == ['kosong', 'kosong']


def test_return_stops_remaining_statements():
    lines, _, _ = run('fungsi f() { cetak "satu"; balikin 1; cetak "dua"; } cetak f();')
    assert lines == ['satu', '1']


def test_closure_over_local_scope():
    source = '''
    fungsi luar() {
      misal rahasia = "tersimpan";
      fungsi dalam() { balikin rahasia; }
      balikin dalam;
    }
    misal f = luar();
    cetak f();
    '''
    lines, err, failed = run(source)
    assert not failed, err
    assert lines == ['tersimpan']


def test_closure_sees_later_global_definitions():
    lines, _, _ = run('fungsi f() { balikin g(); } fungsi g() { balikin "g"; } cetak f();')
    assert lines == ['g']


def test_functions_are_first_class():
    source = '''
    fungsi dua_kali(f, x) { balikin f(f(x)); }
    fungsi tambah_satu(n) { balikin n + 1; }
    cetak dua_kali(tambah_satu, 5);
    '''
    lines, _, _ = run(source)
    assert lines == ['7']


def test_arguments_evaluated_left_to_right():
    source = '''
    fungsi catat(x) { cetak x; balikin x; }
    fungsi f(a, b, c) { balikin a + b + c; }
    cetak f(catat(1), catat(2), catat(3));
    '''
    lines, _, _ = run(source)
    assert lines == ['1', '2', '3', '6']


def test_arity_is_enforced():
    lines, err, failed = run('fungsi f(a, b) { balikin a; }\ncetak f(1);')
    assert failed
    assert err == "[line 2] Runtime error: ')' - expected 2 arguments but got 1\n"
    _, err, failed = run('fungsi f() { }\nf(1, 2);')
    assert failed
    assert 'expected 0 arguments but got 2' in err


def test_calling_non_function():
    _, err, failed = run('"teks"();')
    assert failed
    assert err == "[line 1] Runtime error: ')' - string value is not callable\n"


def test_unbounded_recursion_reports_stack_overflow():
    _, err, failed = run('fungsi f() { balikin f(); }\nf();')
    assert failed
    assert 'stack overflow' in err
    assert err.count('\n') == 1


def test_global_environment_persists_between_runs():
    interp = Interpreter()
    run('misal x = 40;', interp)
    run('fungsi tambah2(n) { balikin n + 2; }', interp)
    lines, _, failed = run('cetak tambah2(x);', interp)
    assert not failed
    assert lines == ['42']


def test_separate_interpreters_do_not_share_globals():
    run('misal x = 1;', Interpreter())
    _, err, failed = run('cetak x;', Interpreter())
    assert failed
    assert 'undefined variable x' in err


def test_run_program_status_codes(capsys):
    assert run_program('cetak 1;') == 0
    assert run_program('cetak ;') == 65
    assert run_program('cetak x;') == 70
    captured = capsys.readouterr()
    assert captured.out == '1\n'


def test_untuk_can_name_variables_and_functions(capsys):
    source = 'misal untuk = 3; cetak untuk; fungsi f(untuk) { balikin untuk * 2; } cetak f(4);'
    assert run_program(source) == 0
    assert capsys.readouterr().out == '3\n8\n'


def test_scan_errors_block_execution(capsys):
    assert run_program('cetak 1; @') == 65
    assert capsys.readouterr().out == ''


def test_debug_trace():
    trace = io.StringIO()
    interp = Interpreter(stdout=io.StringIO(), debug_level=3, debug_file=trace)
    statements, _ = parse_program('misal a = 1; fungsi f() { } jika a { f(); }')
    interp.interpret(statements)
    interp.close()
    text = trace.getvalue()
    assert 'declare a: number = 1' in text
    assert 'define function f/0' in text
    assert 'if condition 1 -> True' in text
    assert 'call <fungsi f> with 0 arguments' in text


def test_debug_trace_file(tmp_path):
    path = tmp_path / 'trace.txt'
    interp = Interpreter(stdout=io.StringIO(), debug_level=1, debug_file=str(path))
    statements, _ = parse_program('cetak 1;')
    interp.interpret(statements)
    interp.close()
    assert path.read_text(encoding='utf-8') == 'exec Print\n'


def test_interpreter_handles_every_node_variant():
    expr_methods = {name for name in ast.ExprVisitor.__abstractmethods__}
    stmt_methods = {name for name in ast.StmtVisitor.__abstractmethods__}
    assert len(expr_methods) == len(ast.EXPRESSION_TYPES)
    assert len(stmt_methods) == len(ast.STATEMENT_TYPES)
    assert not Interpreter.__abstractmethods__


def test_visitor_missing_a_variant_cannot_be_built():
    class Partial(ast.ExprVisitor):
        def visit_binary(self, expr, env):
            return None

    with pytest.raises(TypeError):
        Partial()
