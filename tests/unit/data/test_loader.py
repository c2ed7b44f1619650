import pandas as pd
import pytest

from binwise.data import derive_outcome, load_dataset
from binwise.exceptions import InvalidParameter

STUDENT_CSV = """school;sex;age;studytime;G1;G2;G3
GP;F;18;2;5;6;6
GP;F;17;2;5;5;6
GP;F;15;2;7;8;10
MS;M;16;3;15;14;15
"""


@pytest.fixture
def student_file(tmp_path):
    path = tmp_path / "student-mat.csv"
    path.write_text(STUDENT_CSV)
    return path


def test_load_dataset(student_file):
    df = load_dataset(student_file)

    assert df.shape == (4, 7)
    assert df["age"].tolist() == [18, 17, 15, 16]
    assert df["school"].tolist() == ["GP", "GP", "GP", "MS"]


def test_load_dataset_separator(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n")
    assert load_dataset(path, sep=",").columns.tolist() == ["a", "b"]


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "nope.csv")


def test_derive_outcome(student_file):
    df = load_dataset(student_file)
    out = derive_outcome(df)

    # pass mark is inclusive
    assert out["pass"].tolist() == [0, 0, 1, 1]
    assert "G3" not in out.columns
    assert "G3" in df.columns


def test_derive_outcome_keep_source(student_file):
    df = load_dataset(student_file)
    out = derive_outcome(df, threshold=15, name="honours", drop_source=False)

    assert out["honours"].tolist() == [0, 0, 0, 1]
    assert out["G3"].tolist() == df["G3"].tolist()


def test_derive_outcome_unknown_column():
    with pytest.raises(InvalidParameter, match="'G4' not found"):
        derive_outcome(pd.DataFrame({"G3": [10]}), source="G4")


def test_derive_outcome_bad_values():
    with pytest.raises(InvalidParameter, match="missing"):
        derive_outcome(pd.DataFrame({"G3": [10, None, "absent"]}))
