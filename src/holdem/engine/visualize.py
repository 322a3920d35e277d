import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

SAVE_PATH = Path("data")


def load_data(path):
    return pd.read_csv(path)


def add_net_winnings(df):
    """Stack change per seat since its previous hand, zero on the first."""
    df = df.sort_values(["game_id", "seat", "hand"]).copy()
    previous = df.groupby(["game_id", "seat"])["chips"].shift(1)
    df["net"] = (df["chips"] - previous).fillna(0)
    return df


def plot_stack_trajectories(df, save_path=SAVE_PATH):
    for game_id, game_df in df.groupby("game_id"):
        plt.figure()
        for name, seat_df in game_df.groupby("name"):
            plt.plot(seat_df["hand"], seat_df["chips"], label=name)
        plt.xlabel("Hand")
        plt.ylabel("Chips")
        plt.title(f"Stacks - Game {game_id}")
        plt.legend()
        plt.savefig(Path(save_path) / f"stacks_game_{game_id}.png")
        plt.close()


def plot_winnings_by_archetype(df, save_path=SAVE_PATH):
    pots_won = (
        df[df["payout"] > 0]
        .groupby("archetype")["payout"]
        .sum()
    )

    plt.figure()
    pots_won.sort_values(ascending=False).plot(kind="bar")
    plt.title("Chips Won by Archetype")
    plt.ylabel("Chips")
    plt.xlabel("Archetype")
    plt.xticks(rotation=20)
    plt.tight_layout()
    plt.savefig(Path(save_path) / "winnings_by_archetype.png")
    plt.close()


def plot_net_distribution(df, save_path=SAVE_PATH):
    df = add_net_winnings(df)
    for archetype, arch_df in df.groupby("archetype"):
        plt.figure()
        plt.hist(arch_df["net"], bins=30)
        plt.title(f"Net Chips per Hand - {archetype}")
        plt.xlabel("Net chips")
        plt.ylabel("Frequency")
        plt.savefig(Path(save_path) / f"net_{archetype}.png")
        plt.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Plot self-play results.")
    parser.add_argument("csv", type=Path, nargs="?", default=SAVE_PATH / "results.csv")
    parser.add_argument("--out", type=Path, default=SAVE_PATH)
    args = parser.parse_args(argv)

    args.out.mkdir(parents=True, exist_ok=True)
    df = load_data(args.csv)
    plot_stack_trajectories(df, args.out)
    plot_winnings_by_archetype(df, args.out)
    plot_net_distribution(df, args.out)


if __name__ == "__main__":
    main()
