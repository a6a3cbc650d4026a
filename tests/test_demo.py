from miner_tui.demo import DemoProducer
from miner_tui.stats import SharedStats, SolverStats


def test_tick_connects_and_advances_solvers():
    shared = SharedStats()
    with shared.write() as stats:
        stats.mining_stats.solvers = [SolverStats(device_id=0), SolverStats(device_id=1)]
    producer = DemoProducer(shared, seed=1)

    for _ in range(3):
        producer.tick()

    snapshot = shared.snapshot()
    assert snapshot.client_stats.connected
    assert snapshot.mining_stats.block_height >= 1_000_000
    assert [solver.iterations for solver in snapshot.mining_stats.solvers] == [3, 3]
    assert all(solver.graphs_per_second > 0 for solver in snapshot.mining_stats.solvers)


def test_producer_thread_stops():
    shared = SharedStats()
    producer = DemoProducer(shared, num_devices=1, interval=0.01)
    producer.start()
    producer.stop()
    producer.join(2)

    assert not producer.is_alive()
    assert shared.snapshot().mining_stats.solvers[0].device_name == "Demo GPU 0"
