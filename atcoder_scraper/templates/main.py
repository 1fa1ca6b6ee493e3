import sys


def main(data: str) -> None:
    lines = data.strip().split("\n")

    print("Hello, AtCoder!")


if __name__ == "__main__":
    main(sys.stdin.read())
