import bench
import run_sim


def test_parse_reads_run_sim_summary(tmp_path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_text("RQ A 10 F\nRQ B 20 F\nRQ C 500 F\nRL A\nC\n", encoding="utf-8")
    run_sim.main(["100", "--trace", str(trace), "--quiet", "--strategy", "B"])
    m = bench.parse(capsys.readouterr().out)
    assert m == {
        "allocations": 2,
        "failed": 1,
        "compactions": 1,
        "bytes_moved": 20,
        "lfe": 80,
        "holes": 1,
        "external_frag": 0.0,
        "utilization": 0.2,
    }


def test_parse_defaults_when_fields_missing():
    m = bench.parse("nothing useful here")
    assert m["allocations"] == 0 and m["failed"] == 0
    assert m["external_frag"] == 0.0
