"""Tests for ASCII and matplotlib output."""

import os
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest

import tiny_qsim
from tiny_qsim import show_counts, show_probabilities, plot_counts


def test_show_counts():
    text = show_counts({"11": 250, "00": 750})
    lines = text.splitlines()
    assert lines[0] == "Measurement Results:"
    assert lines[2].startswith("|00⟩:")
    assert lines[3].startswith("|11⟩:")
    assert "750" in lines[2] and "75.0%" in lines[2]
    assert "25.0%" in lines[3]


def test_show_counts_explicit_total():
    text = show_counts({"0": 10}, total=40)
    assert "25.0%" in text


def test_show_counts_empty():
    assert show_counts({}).splitlines() == ["Measurement Results:", "─" * 50]


def test_show_probabilities_threshold():
    text = show_probabilities(np.array([0.5, 0.005, 0.0, 0.495]), num_qubits=2)
    assert "|00⟩" in text
    assert "|11⟩" in text
    assert "|01⟩" not in text
    assert "|10⟩" not in text


def test_show_probabilities_zero_qubits():
    assert "|⟩" in show_probabilities([1.0], num_qubits=0)


def test_plot_counts(tmp_path):
    pytest.importorskip("matplotlib")
    path = tmp_path / "counts.png"
    fig = plot_counts({"00": 3, "11": 5}, path=str(path), title="bell")
    assert path.exists()
    assert fig.axes[0].get_title() == "bell"
    assert len(fig.axes[0].patches) == 2


def test_import_and_plot_keep_host_backend():
    """Importing and plotting must not switch the host's backend."""
    pytest.importorskip("matplotlib")
    src = Path(tiny_qsim.__file__).resolve().parents[1]
    code = (
        "import sys, matplotlib\n"
        "matplotlib.use('svg')\n"
        "import tiny_qsim\n"
        "tiny_qsim.plot_counts({'0': 1, '1': 2})\n"
        "print(matplotlib.get_backend(), 'matplotlib.pyplot' in sys.modules)\n"
    )
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src), env.get("PYTHONPATH")]))
    proc = subprocess.run([sys.executable, "-c", code], env=env,
                          capture_output=True, text=True, check=True)
    assert proc.stdout.split() == ["svg", "False"]
