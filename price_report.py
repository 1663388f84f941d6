#!/usr/bin/env python3
"""
Bootstrap analysis of short-term rental listing prices
"""

import argparse
import logging
import os

from bootstrap_estimator import EmptySampleError, EstimatorConfig, InvalidParameterError, estimate_with_config
from data_prep import ListingDataPrep
from grouped_report import build_report, report_to_frame
from keyword_analysis import DEFAULT_KEYWORDS, keyword_presence_frame, keyword_report
from listing_query import query
from price_distribution import compare_group_fits, fit_gamma
from report_plots import plot_ci_report, plot_price_distribution

logger = logging.getLogger(__name__)


class ListingPriceReport:
    """
    Price distribution, grouped confidence intervals and keyword analysis for listings
    """

    def __init__(self, df=None, config=None, target_column='price', output_dir='output', save_results=True):
        """
        Initialize with the cleaned listings and estimator settings

        Parameters:
        -----------
        df : DataFrame, optional
            Cleaned listings (see ListingDataPrep)
        config : EstimatorConfig, optional
            Resample count, alpha and seed; defaults to EstimatorConfig()
        target_column : str, default='price'
            Column holding the nightly price
        output_dir : str, default='output'
            Directory for saving outputs
        save_results : bool, default=True
            Whether to write CSVs and charts
        """
        self.df = df
        self.config = config or EstimatorConfig()
        self.target = target_column
        self.output_dir = output_dir
        self.save_results = save_results

        os.makedirs(output_dir, exist_ok=True)

        logger.info("Initialized listing price report")

    def _require_data(self):
        if self.df is None:
            raise ValueError("No data loaded. Pass a cleaned DataFrame first.")

    def _save(self, frame, filename):
        if not self.save_results:
            return
        path = os.path.join(self.output_dir, filename)
        frame.to_csv(path, index=False)
        logger.info(f"Saved {len(frame)} rows to '{path}'")

    def _plot(self, plot_fn, *args, **kwargs):
        if not self.save_results:
            return
        try:
            plot_fn(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error creating visualization: {e}")

    def analyze_price_distribution(self, group_by='neighborhood', min_group_size=30):
        """
        Fit a gamma distribution to all prices and to each group separately

        Returns:
        --------
        tuple: (GammaFit for all listings, DataFrame of per-group fits)
        """
        self._require_data()
        logger.info("===== PRICE DISTRIBUTION =====")

        prices = self.df[self.target].dropna()
        overall = None
        try:
            overall = fit_gamma(prices)
            logger.info(f"Gamma fit: shape={overall.shape:.3f}, scale={overall.scale:.2f}, "
                        f"KS p-value={overall.ks_pvalue:.4f}")
        except ValueError as e:
            logger.error(f"Gamma fit of all prices failed: {e}")

        group_fits = None
        if group_by in self.df.columns:
            group_fits = compare_group_fits(self.df, group_by, min_group_size, price_column=self.target)
            rejected = int((group_fits['ks_pvalue'] < self.config.alpha).sum())
            logger.info(f"Gamma rejected for {rejected} of {len(group_fits)} {group_by} groups "
                        f"at alpha={self.config.alpha}")
            self._save(group_fits, f'gamma_fit_by_{group_by}.csv')

        if overall is not None:
            self._plot(plot_price_distribution, prices, overall, self.output_dir)
        return overall, group_fits

    def grouped_report(self, group_by, title=None):
        """Ranked bootstrap CI table for one attribute, as a DataFrame"""
        self._require_data()
        logger.info(f"===== BOOTSTRAP BY {group_by.upper()} =====")

        rows = build_report(self.df, group_by, self.config, price_column=self.target)
        frame = report_to_frame(rows, group_label=group_by)

        for row in rows[:10]:
            r = row.result
            logger.info(f"{row.rank}. {row.group}: ${r.point_estimate:.2f} "
                        f"(CI ${r.lower_bound:.2f} to ${r.upper_bound:.2f}, n={r.sample_size})")

        self._save(frame, f'bootstrap_by_{group_by}.csv')
        self._plot(plot_ci_report, frame, group_by, title or f'Mean price by {group_by}',
                   self.output_dir, f'bootstrap_by_{group_by}.png')
        return frame

    def neighborhood_report(self):
        return self.grouped_report('neighborhood', 'Mean price by neighborhood')

    def bedroom_report(self):
        return self.grouped_report('bedrooms', 'Mean price by bedroom count')

    def filtered_estimate(self, filter_spec=None):
        """Bootstrap the mean price of the listings matching filter_spec"""
        self._require_data()
        result = query(self.df, filter_spec or {}, self.config, price_column=self.target)
        logger.info(f"{filter_spec or 'All listings'}: ${result.point_estimate:.2f} "
                    f"(CI ${result.lower_bound:.2f} to ${result.upper_bound:.2f}, n={result.sample_size})")
        return result

    def keyword_report(self, keywords=None, text_column='summary'):
        """Ranked bootstrap CI table for listings mentioning each keyword"""
        self._require_data()
        logger.info("===== KEYWORD PRESENCE ANALYSIS =====")

        rows = keyword_report(self.df, keywords or DEFAULT_KEYWORDS, self.config,
                              text_column=text_column, price_column=self.target)
        baseline = estimate_with_config(self.df[self.target].dropna().to_numpy(dtype=float), self.config)
        frame = keyword_presence_frame(rows, baseline)

        self._save(frame, 'bootstrap_by_keyword.csv')
        self._plot(plot_ci_report, frame, 'keyword', 'Mean price by summary keyword',
                   self.output_dir, 'bootstrap_by_keyword.png')
        return frame

    def run_all_analyses(self, keywords=None):
        """Run every analysis in sequence, skipping those the data can't support"""
        self._require_data()
        logger.info("===== RUNNING ALL LISTING PRICE ANALYSES =====")

        results = {}
        results['price_distribution'] = self.analyze_price_distribution()

        for name, column, method in [('neighborhood', 'neighborhood', self.neighborhood_report),
                                     ('bedrooms', 'bedrooms', self.bedroom_report)]:
            if column in self.df.columns:
                results[name] = method()
            else:
                logger.warning(f"No '{column}' column, skipping {name} report")

        try:
            results['all_listings'] = self.filtered_estimate({})
        except EmptySampleError as e:
            logger.error(f"Whole-dataset estimate failed: {e}")

        if 'summary' in self.df.columns:
            results['keywords'] = self.keyword_report(keywords)
        else:
            logger.warning("No 'summary' column, skipping keyword analysis")

        return results


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument('--data', default='listings.csv', help='Listings CSV export')
    ap.add_argument('--output-dir', default='output')
    ap.add_argument('--resamples', type=int, default=1000, help='Bootstrap trials per estimate')
    ap.add_argument('--alpha', type=float, default=0.05, help='Two-sided CI covers 1 - alpha')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--max-price', type=float, default=None, help='Drop listings priced above this')
    ap.add_argument('--keywords', nargs='*', default=None, help='Summary keywords to analyse')
    args = ap.parse_args(argv)

    try:
        config = EstimatorConfig(resample_count=args.resamples, alpha=args.alpha, seed=args.seed)
    except InvalidParameterError as e:
        ap.error(str(e))

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    prep = ListingDataPrep(args.data, output_dir=args.output_dir, max_price=args.max_price)
    prep.load_data()
    df = prep.prepare_data()

    report = ListingPriceReport(df, config=config, output_dir=args.output_dir)
    report.run_all_analyses(keywords=args.keywords)

    logger.info(f"Analysis complete. Results saved to {args.output_dir}")


if __name__ == "__main__":
    main()
