import matplotlib

matplotlib.use("Agg")

import pytest

from post_insights.config import reset_settings
from post_insights.data_prep import parse_posts

SAMPLE_CSV = """post_id,media_type,caption,likes,comments,shares,saves,reach,impressions
1,photo,"Sunset, beach",100,10,5,5,1000,1500
2,video,Launch day,"1,200",30,20,50,10000,12000
3,reel,Quick tip,300,20,10,20,0,500

4,photo,Morning coffee,50,5,0,5,400,600
5,carousel,,80,0,10,10,2000,2100
"""


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def posts():
    return parse_posts(SAMPLE_CSV)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "posts.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()
