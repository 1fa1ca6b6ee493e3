import pytest

from atcoder_scraper.document import SoupNode
from atcoder_scraper.models import Problem, ScraperConfig, TestCase


@pytest.fixture
def atcoder_task_html():
    return """
    <html><body>
    <div class="col-sm-12">
      <span class="h2">
        A - Welcome to AtCoder
        <a class="btn btn-default btn-sm" href="/contests/abc001/tasks/abc001_a/editorial">Editorial</a>
      </span>
      <p>Time Limit: 2 sec / Memory Limit: 1024 MiB</p>
      <div id="task-statement">
        <span class="lang">
          <span class="lang-ja">
            <p>配点 : <var>100</var> 点</p>
            <div class="part">
              <section>
                <h3>問題文</h3>
                <p><var>N</var> 個の整数が与えられます。</p>
                <div class="btn-copy">Copy</div>
                <p>Editorial</p>
              </section>
            </div>
            <div class="part">
              <section>
                <h3>制約</h3>
                <ul><li><var>1 \\leq N &lt; 10</var></li></ul>
              </section>
            </div>
            <div class="part">
              <section>
                <h3>入力例 1 <span class="btn btn-default btn-sm btn-copy">Copy</span></h3>
                <pre>3
1 2 3
</pre>
              </section>
            </div>
            <div class="part">
              <section>
                <h3>出力例 1 <span class="btn btn-default btn-sm btn-copy">Copy</span></h3>
                <pre>6
</pre>
              </section>
            </div>
          </span>
          <span class="lang-en">
            <div class="part">
              <section>
                <h3>Problem Statement</h3>
                <p>You are given <var>N</var> integers.</p>
              </section>
            </div>
            <div class="part">
              <section>
                <h3>Sample Input 1</h3>
                <pre>99</pre>
              </section>
            </div>
          </span>
        </span>
      </div>
    </div>
    </body></html>
    """


@pytest.fixture
def atcoder_tasks_html():
    return """
    <html><body>
    <table class="table table-bordered table-striped">
      <thead><tr><th>Task</th><th>Task Name</th></tr></thead>
      <tbody>
        <tr><td class="text-center"><a href="/contests/abc001/tasks/abc001_1">A</a></td>
            <td><a href="/contests/abc001/tasks/abc001_1">積雪深差</a></td></tr>
        <tr><td class="text-center"><a href="/contests/abc001/tasks/abc001_2">B</a></td>
            <td><a href="/contests/abc001/tasks/abc001_2">視程の通報</a></td></tr>
        <tr><td class="text-center">-</td><td>no link</td></tr>
        <tr><td class="text-center"><a href="/contests/abc001/tasks/abc001_1">A</a></td>
            <td><a href="/contests/abc001/tasks/abc001_1">duplicate</a></td></tr>
      </tbody>
    </table>
    <table><tbody>
      <tr><td><a href="/contests/abc001/tasks/abc001_9">Z</a></td></tr>
    </tbody></table>
    </body></html>
    """


@pytest.fixture
def parse_html():
    return SoupNode.parse


@pytest.fixture
def sample_problem():
    return Problem(
        id="A",
        title="Welcome to AtCoder",
        source_url="https://atcoder.jp/contests/abc001/tasks/abc001_a",
        time_limit="2 sec",
        memory_limit="1024 MiB",
        statement="## 問題文\n\nHello\n\n\n\n## 制約\n\nN <= 10",
        test_cases=[
            TestCase(input="3\n1 2 3", output="6"),
            TestCase(input="1\n5", output="5"),
        ],
    )


@pytest.fixture
def fast_config(tmp_path):
    return ScraperConfig(
        batch_pause_seconds=0,
        problem_retry_delay_seconds=0,
        listing_retry_delay_seconds=0,
        output_root=tmp_path / "problems",
        template_path=None,
    )
